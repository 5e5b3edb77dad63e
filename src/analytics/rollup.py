from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from typing import Optional, Tuple

from src.core.errors import InvalidInputError
from src.models.performance import METRICS, AggregateRecord

logger = logging.getLogger(__name__)

SUNDAY = 6  # datetime.weekday()


@dataclass(frozen=True)
class RollupResult:
    record: AggregateRecord
    should_archive: bool
    reset_weekly: bool
    reset_monthly: bool


def _local(value: datetime, tz: Optional[tzinfo]) -> datetime:
    if tz is None:
        return value
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz)


def determine_resets(
    last_update: Optional[datetime], now: datetime, tz: Optional[tzinfo] = None
) -> Tuple[bool, bool]:
    """Return ``(reset_weekly, reset_monthly)`` for a submission made at ``now``.

    A change of calendar month resets both windows. Within a month the week
    rolls over on the first submission made on a Sunday; only the day of week
    is compared, so skipped weeks are not detected by elapsed time. The year is
    part of the month comparison, so the same month of a later year also resets.
    """
    if last_update is None:
        return False, False
    last = _local(last_update, tz)
    current = _local(now, tz)
    if (current.year, current.month) != (last.year, last.month):
        return True, True
    if current.weekday() == SUNDAY and last.weekday() != SUNDAY:
        return True, False
    return False, False


def rollup(
    previous: AggregateRecord,
    daily_calls: int,
    daily_bookings: int,
    daily_attendance: int,
    now: datetime,
    tz: Optional[tzinfo] = None,
) -> RollupResult:
    """Fold today's counts into ``previous``.

    A participant with no history is passed as ``AggregateRecord(name=...)``:
    zero counters and no ``last_update``, so no reset is evaluated.
    """
    reset_weekly, reset_monthly = determine_resets(previous.last_update, now, tz)
    if reset_monthly:
        logger.info("Monthly reset triggered for %s", previous.name)
    if reset_weekly:
        logger.info("Weekly reset triggered for %s", previous.name)

    today = {
        "calls": daily_calls,
        "bookings": daily_bookings,
        "attendance": daily_attendance,
    }
    updates = {}
    for metric in METRICS:
        weekly = 0 if reset_weekly else previous.counter(metric, "weekly")
        monthly = 0 if reset_monthly else previous.counter(metric, "monthly")
        updates[f"{metric}_daily"] = today[metric]
        updates[f"{metric}_weekly"] = weekly + today[metric]
        updates[f"{metric}_monthly"] = monthly + today[metric]
    updates["last_update"] = now

    return RollupResult(
        record=previous.model_copy(update=updates),
        should_archive=reset_monthly,
        reset_weekly=reset_weekly,
        reset_monthly=reset_monthly,
    )


def compute_rates(bookings: int, attendance: int, leads: int) -> Tuple[float, float]:
    """Return ``(conv_rate, attendance_rate)`` as fractions, 0 when undefined."""
    conv_rate = bookings / leads if leads > 0 else 0.0
    attendance_rate = attendance / bookings if bookings > 0 else 0.0
    return conv_rate, attendance_rate


def validate_daily_counts(**counts: int) -> None:
    negative = sorted(field for field, value in counts.items() if value < 0)
    if negative:
        raise InvalidInputError(
            f"Daily counts must be non-negative whole numbers: {', '.join(negative)}"
        )
