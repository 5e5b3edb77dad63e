from __future__ import annotations

import logging
import random
from datetime import datetime, timezone, tzinfo
from threading import Lock
from typing import Dict, List, Optional, Protocol
from zoneinfo import ZoneInfo

import httpx

from src.analytics.rollup import compute_rates, rollup, validate_daily_counts
from src.analytics.scoring import PhraseChooser, StatusResult, TierThresholds, score
from src.core.config import get_settings
from src.core.errors import (
    BadRequestError,
    MissingIdentityError,
    NotFoundError,
    StorageFailureError,
)
from src.models.performance import (
    DEFAULT_TARGETS,
    METRICS,
    PERIODS,
    AggregateRecord,
    TargetSet,
)
from src.schemas.performance import (
    EmployeeDashboard,
    MetricIndicator,
    PerformanceRecord,
    PerformanceStatus,
    PerformanceSubmissionRequest,
    SubmissionResult,
    TargetsResponse,
    TeamSummaryCell,
    TeamSummaryRow,
)

logger = logging.getLogger(__name__)


class PerformanceStore(Protocol):
    def get(self, name: str) -> Optional[AggregateRecord]: ...

    def upsert(self, name: str, record: AggregateRecord) -> AggregateRecord: ...

    def list_all(self) -> List[AggregateRecord]: ...


class ArchiveSink(Protocol):
    def send(self, payload: Dict[str, object]) -> bool: ...


def _to_status(result: StatusResult) -> PerformanceStatus:
    return PerformanceStatus(
        ratio=result.ratio,
        percentage=result.percentage,
        tier=result.tier,
        status=result.status,
        label=result.label,
        color_class=result.color_class,
        phrase=result.phrase,
    )


def _to_record(record: AggregateRecord) -> PerformanceRecord:
    return PerformanceRecord.model_validate(record)


def _percent(value: float) -> str:
    return f"{value * 100:.2f}%"


class PerformanceService:
    _name_locks: Dict[str, Lock] = {}
    _name_locks_guard: Lock = Lock()

    def __init__(
        self,
        repository: PerformanceStore,
        archive_client: ArchiveSink,
        targets: TargetSet = DEFAULT_TARGETS,
        choose: PhraseChooser = random.choice,
    ) -> None:
        self.repository = repository
        self.archive_client = archive_client
        self.targets = targets
        self.choose = choose
        self.settings = get_settings()

    @classmethod
    def _lock_for(cls, name: str) -> Lock:
        with cls._name_locks_guard:
            lock = cls._name_locks.get(name)
            if lock is None:
                lock = Lock()
                cls._name_locks[name] = lock
            return lock

    @staticmethod
    def _now_utc() -> datetime:
        return datetime.now(timezone.utc)

    def _timezone(self) -> Optional[tzinfo]:
        name = (self.settings.business_timezone or "").strip()
        return ZoneInfo(name) if name else None

    def _thresholds(self) -> TierThresholds:
        return TierThresholds(
            green=self.settings.threshold_green,
            yellow=self.settings.threshold_yellow,
        )

    def _score(self, actual: float, target: float) -> StatusResult:
        return score(actual, target, thresholds=self._thresholds(), choose=self.choose)

    def list_roster(self) -> List[str]:
        raw = self.settings.employee_names or ""
        return [item.strip() for item in raw.split(",") if item.strip()]

    def get_targets(self) -> TargetsResponse:
        return TargetsResponse(
            **self.targets.model_dump(),
            threshold_green=self.settings.threshold_green,
            threshold_yellow=self.settings.threshold_yellow,
        )

    def _resolve_name(self, employee_name: Optional[str]) -> str:
        name = (employee_name or "").strip()
        if not name:
            raise MissingIdentityError()
        if name not in self.list_roster():
            raise BadRequestError(f"Unknown employee: {name}")
        return name

    def _is_same_local_day(self, last_update: Optional[datetime], now: datetime) -> bool:
        if last_update is None:
            return False
        tz = self._timezone()
        if tz is None:
            return last_update.date() == now.date()
        if last_update.tzinfo is None:
            last_update = last_update.replace(tzinfo=timezone.utc)
        return last_update.astimezone(tz).date() == now.astimezone(tz).date()

    def _load(self, name: str) -> Optional[AggregateRecord]:
        try:
            return self.repository.get(name)
        except httpx.HTTPError as exc:
            logger.error("Failed to read performance for %s: %s", name, exc)
            raise StorageFailureError(f"Failed to load performance data: {exc}") from exc

    def _load_all(self) -> List[AggregateRecord]:
        try:
            return self.repository.list_all()
        except httpx.HTTPError as exc:
            logger.error("Failed to list performance records: %s", exc)
            raise StorageFailureError(f"Failed to load performance data: {exc}") from exc

    def submit(
        self, request: PerformanceSubmissionRequest, now: Optional[datetime] = None
    ) -> SubmissionResult:
        name = self._resolve_name(request.employee_name)
        leads = request.leads if request.leads is not None else self.settings.default_daily_leads
        validate_daily_counts(
            calls=request.calls,
            bookings=request.bookings,
            attendance=request.attendance,
            leads=leads,
        )
        logger.debug(
            "Submitting performance for %s: calls=%s bookings=%s attendance=%s leads=%s",
            name,
            request.calls,
            request.bookings,
            request.attendance,
            leads,
        )

        with self._lock_for(name):
            submitted_at = now or self._now_utc()
            previous = self._load(name)

            if (
                previous is not None
                and self.settings.block_duplicate_daily_submission
                and self._is_same_local_day(previous.last_update, submitted_at)
            ):
                raise BadRequestError(f"Today's performance was already submitted for {name}")

            result = rollup(
                previous or AggregateRecord(name=name),
                request.calls,
                request.bookings,
                request.attendance,
                submitted_at,
                self._timezone(),
            )
            conv_rate, attendance_rate = compute_rates(request.bookings, request.attendance, leads)
            record = result.record.model_copy(
                update={
                    "daily_leads": leads,
                    "conv_rate": conv_rate,
                    "attendance_rate": attendance_rate,
                }
            )
            try:
                saved = self.repository.upsert(name, record)
            except httpx.HTTPError as exc:
                logger.error("Failed to save performance for %s: %s", name, exc)
                raise StorageFailureError(f"Failed to save performance data: {exc}") from exc

        daily_status = self._score(request.calls, self.targets.calls_daily)
        archive_action = "archiveAndInsert" if result.should_archive else "insertData"
        archive_delivered = self.archive_client.send(
            {
                "action": archive_action,
                "employeeName": name,
                "calls": request.calls,
                "bookings": request.bookings,
                "attendance": request.attendance,
                "leads": leads,
                "conversionRate": _percent(conv_rate),
                "attendanceRate": _percent(attendance_rate),
                "dailyStatus": daily_status.label,
            }
        )

        return SubmissionResult(
            record=_to_record(saved),
            reset_weekly=result.reset_weekly,
            reset_monthly=result.reset_monthly,
            should_archive=result.should_archive,
            archive_action=archive_action,
            archive_delivered=archive_delivered,
            daily_status=_to_status(daily_status),
            message=f"Today's performance was recorded for {name}",
        )

    def get_dashboard(self, name: str) -> EmployeeDashboard:
        if name not in self.list_roster():
            raise NotFoundError(f"Unknown employee: {name}")
        stored = self._load(name)
        record = stored or AggregateRecord(name=name)

        indicators: List[MetricIndicator] = []
        for metric in METRICS:
            for period in PERIODS:
                actual = record.counter(metric, period)
                target = self.targets.target_for(metric, period)
                indicators.append(
                    MetricIndicator(
                        metric=metric,
                        period=period,
                        actual=actual,
                        target=target,
                        status=_to_status(self._score(actual, target)),
                    )
                )

        rates = [
            MetricIndicator(
                metric="conversion_rate",
                period="daily",
                actual=record.conv_rate,
                target=self.targets.conv_rate_target,
                status=_to_status(self._score(record.conv_rate, self.targets.conv_rate_target)),
            ),
            MetricIndicator(
                metric="attendance_rate",
                period="daily",
                actual=record.attendance_rate,
                target=self.targets.attendance_rate_target,
                status=_to_status(
                    self._score(record.attendance_rate, self.targets.attendance_rate_target)
                ),
            ),
        ]

        banner = self._score(record.calls_daily, self.targets.calls_daily)
        return EmployeeDashboard(
            record=_to_record(record),
            has_history=stored is not None,
            banner=_to_status(banner),
            indicators=indicators,
            rates=rates,
        )

    def _summary_cell(self, value: float, target: float, display: str) -> TeamSummaryCell:
        return TeamSummaryCell(
            value=value,
            display=display,
            status=_to_status(self._score(value, target)),
        )

    def get_team_summary(self) -> List[TeamSummaryRow]:
        roster = self.list_roster()
        order = {name: index for index, name in enumerate(roster)}
        records = sorted(
            self._load_all(),
            key=lambda item: (order.get(item.name, len(roster)), item.name),
        )
        return [
            TeamSummaryRow(
                name=record.name,
                calls=self._summary_cell(
                    record.calls_daily, self.targets.calls_daily, str(record.calls_daily)
                ),
                bookings=self._summary_cell(
                    record.bookings_daily, self.targets.bookings_daily, str(record.bookings_daily)
                ),
                attendance=self._summary_cell(
                    record.attendance_daily,
                    self.targets.attendance_daily,
                    str(record.attendance_daily),
                ),
                conversion_rate=self._summary_cell(
                    record.conv_rate,
                    self.targets.conv_rate_target,
                    f"{record.conv_rate * 100:.1f}%",
                ),
                last_update=record.last_update,
            )
            for record in records
        ]
