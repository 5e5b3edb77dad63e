from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from src.analytics.rollup import compute_rates, determine_resets, rollup, validate_daily_counts
from src.core.errors import InvalidInputError
from src.models.performance import AggregateRecord

TUESDAY = datetime(2026, 1, 6, 9, 0)
WEDNESDAY = datetime(2026, 1, 7, 9, 0)
SATURDAY = datetime(2026, 1, 10, 18, 0)
SUNDAY = datetime(2026, 1, 11, 9, 0)


def _record(**values) -> AggregateRecord:
    return AggregateRecord(name="سلمى", **values)


def test_first_submission_seeds_every_window() -> None:
    result = rollup(_record(), 140, 21, 11, TUESDAY)
    record = result.record
    assert (record.calls_daily, record.calls_weekly, record.calls_monthly) == (140, 140, 140)
    assert (record.bookings_daily, record.bookings_weekly, record.bookings_monthly) == (21, 21, 21)
    assert (record.attendance_daily, record.attendance_weekly, record.attendance_monthly) == (
        11,
        11,
        11,
    )
    assert record.last_update == TUESDAY
    assert result.should_archive is False
    assert result.reset_weekly is False
    assert result.reset_monthly is False


def test_record_without_history_never_resets() -> None:
    # No last_update: even a Sunday at the start of a month only seeds the windows.
    result = rollup(_record(), 30, 4, 2, datetime(2026, 2, 1, 9, 0))
    assert result.reset_weekly is False
    assert result.reset_monthly is False
    assert result.should_archive is False
    assert result.record.calls_monthly == 30
    assert result.record.name == "سلمى"


def test_same_week_accumulates() -> None:
    previous = _record(calls_daily=80, calls_weekly=100, calls_monthly=400, last_update=TUESDAY)
    result = rollup(previous, 50, 0, 0, WEDNESDAY)
    assert result.record.calls_daily == 50
    assert result.record.calls_weekly == 150
    assert result.record.calls_monthly == 450
    assert result.reset_weekly is False
    assert result.should_archive is False


def test_daily_fields_are_overwritten_not_accumulated() -> None:
    previous = _record(bookings_daily=30, bookings_weekly=30, bookings_monthly=30, last_update=TUESDAY)
    result = rollup(previous, 0, 4, 0, WEDNESDAY)
    assert result.record.bookings_daily == 4
    assert result.record.bookings_weekly == 34


def test_month_boundary_resets_both_windows_and_archives() -> None:
    previous = _record(
        calls_weekly=300,
        calls_monthly=3000,
        bookings_weekly=40,
        bookings_monthly=500,
        attendance_weekly=20,
        attendance_monthly=250,
        last_update=datetime(2026, 1, 30, 17, 0),
    )
    result = rollup(previous, 120, 18, 9, datetime(2026, 2, 2, 9, 0))
    record = result.record
    assert result.reset_monthly is True
    assert result.reset_weekly is True
    assert result.should_archive is True
    assert (record.calls_weekly, record.calls_monthly) == (120, 120)
    assert (record.bookings_weekly, record.bookings_monthly) == (18, 18)
    assert (record.attendance_weekly, record.attendance_monthly) == (9, 9)


def test_same_month_number_in_a_later_year_still_resets() -> None:
    previous = _record(calls_monthly=900, last_update=datetime(2025, 1, 15, 9, 0))
    result = rollup(previous, 10, 0, 0, datetime(2026, 1, 15, 9, 0))
    assert result.reset_monthly is True
    assert result.record.calls_monthly == 10


def test_sunday_after_saturday_resets_weekly_only() -> None:
    previous = _record(
        calls_weekly=700,
        calls_monthly=1500,
        bookings_weekly=100,
        bookings_monthly=220,
        attendance_weekly=50,
        attendance_monthly=110,
        last_update=SATURDAY,
    )
    result = rollup(previous, 140, 21, 11, SUNDAY)
    record = result.record
    assert result.reset_weekly is True
    assert result.reset_monthly is False
    assert result.should_archive is False
    assert record.calls_weekly == 140
    assert record.calls_monthly == 1640
    assert record.attendance_weekly == 11
    assert record.attendance_monthly == 121


def test_weekly_reset_zeroes_weekly_bookings_and_keeps_monthly_bookings() -> None:
    # Behavior chosen deliberately: the weekly reset clears bookings_weekly.
    # Earlier versions cleared bookings_monthly here, which wiped the month's
    # bookings every Sunday; that is treated as a defect and not reproduced.
    previous = _record(bookings_weekly=100, bookings_monthly=220, last_update=SATURDAY)
    result = rollup(previous, 0, 21, 0, SUNDAY)
    assert result.record.bookings_weekly == 21
    assert result.record.bookings_monthly == 241


def test_second_sunday_submission_does_not_reset_again() -> None:
    previous = _record(calls_weekly=140, calls_monthly=1640, last_update=SUNDAY)
    result = rollup(previous, 20, 0, 0, datetime(2026, 1, 11, 15, 0))
    assert result.reset_weekly is False
    assert result.record.calls_weekly == 160


def test_week_rollover_is_missed_without_a_sunday_submission() -> None:
    # Only the day of week is compared; Saturday to the following Monday keeps accumulating.
    previous = _record(calls_weekly=700, last_update=SATURDAY)
    result = rollup(previous, 10, 0, 0, datetime(2026, 1, 12, 9, 0))
    assert result.reset_weekly is False
    assert result.record.calls_weekly == 710


def test_resets_follow_the_business_timezone() -> None:
    riyadh = ZoneInfo("Asia/Riyadh")
    last_update = datetime(2026, 1, 10, 12, 0, tzinfo=timezone.utc)
    # 22:00 UTC on Saturday is already Sunday 01:00 in Riyadh.
    now = datetime(2026, 1, 10, 22, 0, tzinfo=timezone.utc)
    assert determine_resets(last_update, now) == (False, False)
    assert determine_resets(last_update, now, riyadh) == (True, False)


def test_month_boundary_uses_the_business_timezone() -> None:
    riyadh = ZoneInfo("Asia/Riyadh")
    last_update = datetime(2026, 1, 30, 12, 0, tzinfo=timezone.utc)
    now = datetime(2026, 1, 31, 22, 30, tzinfo=timezone.utc)
    assert determine_resets(last_update, now, riyadh) == (True, True)


def test_no_reset_without_previous_update() -> None:
    assert determine_resets(None, SUNDAY) == (False, False)


def test_compute_rates() -> None:
    conv_rate, attendance_rate = compute_rates(bookings=21, attendance=11, leads=50)
    assert conv_rate == pytest.approx(0.42)
    assert attendance_rate == pytest.approx(0.5238, abs=1e-4)


def test_compute_rates_guard_zero_denominators() -> None:
    assert compute_rates(bookings=21, attendance=11, leads=0)[0] == 0
    assert compute_rates(bookings=0, attendance=5, leads=50) == (0, 0)


@pytest.mark.parametrize("field", ["calls", "bookings", "attendance", "leads"])
def test_validate_daily_counts_rejects_negatives(field: str) -> None:
    counts = {"calls": 1, "bookings": 1, "attendance": 1, "leads": 1}
    counts[field] = -1
    with pytest.raises(InvalidInputError) as excinfo:
        validate_daily_counts(**counts)
    assert field in excinfo.value.message


def test_validate_daily_counts_accepts_zeroes() -> None:
    validate_daily_counts(calls=0, bookings=0, attendance=0, leads=0)
