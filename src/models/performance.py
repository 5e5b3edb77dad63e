from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict

Metric = Literal["calls", "bookings", "attendance"]
Period = Literal["daily", "weekly", "monthly"]

METRICS: tuple[Metric, ...] = ("calls", "bookings", "attendance")
PERIODS: tuple[Period, ...] = ("daily", "weekly", "monthly")


class AggregateRecord(BaseModel):
    """One row of ``call_center_performance``; the employee name is the key."""

    model_config = ConfigDict(extra="ignore")

    name: str
    calls_daily: int = 0
    calls_weekly: int = 0
    calls_monthly: int = 0
    bookings_daily: int = 0
    bookings_weekly: int = 0
    bookings_monthly: int = 0
    attendance_daily: int = 0
    attendance_weekly: int = 0
    attendance_monthly: int = 0
    daily_leads: int = 0
    conv_rate: float = 0.0
    attendance_rate: float = 0.0
    last_update: Optional[datetime] = None

    def counter(self, metric: Metric, period: Period) -> int:
        return getattr(self, f"{metric}_{period}")

    def to_row(self) -> Dict[str, Any]:
        row = self.model_dump(mode="json")
        if row.get("last_update") is None:
            row.pop("last_update", None)
        return row


class TargetSet(BaseModel):
    model_config = ConfigDict(frozen=True)

    calls_daily: int = 140
    calls_weekly: int = 840
    calls_monthly: int = 3640
    bookings_daily: int = 21
    bookings_weekly: int = 126
    bookings_monthly: int = 546
    attendance_daily: int = 11
    attendance_weekly: int = 66
    attendance_monthly: int = 273
    # bookings / marketing leads
    conv_rate_target: float = 0.25
    # attendance / bookings
    attendance_rate_target: float = 0.50

    def target_for(self, metric: Metric, period: Period) -> int:
        return getattr(self, f"{metric}_{period}")


DEFAULT_TARGETS = TargetSet()
