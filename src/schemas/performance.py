from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from src.shared.base import BaseSchema

Tier = Literal["GREEN", "YELLOW", "RED", "NO_TARGET"]
ArchiveAction = Literal["insertData", "archiveAndInsert"]


class PerformanceSubmissionRequest(BaseSchema):
    employee_name: Optional[str] = None
    calls: int = 0
    bookings: int = 0
    attendance: int = 0
    leads: Optional[int] = None


class PerformanceStatus(BaseSchema):
    ratio: float
    percentage: float
    tier: Tier
    status: str
    label: str
    color_class: str
    phrase: str


class PerformanceRecord(BaseSchema):
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


class MetricIndicator(BaseSchema):
    metric: str
    period: str
    actual: float
    target: float
    status: PerformanceStatus


class EmployeeDashboard(BaseSchema):
    record: PerformanceRecord
    has_history: bool
    banner: PerformanceStatus
    indicators: List[MetricIndicator]
    rates: List[MetricIndicator]


class SubmissionResult(BaseSchema):
    record: PerformanceRecord
    reset_weekly: bool
    reset_monthly: bool
    should_archive: bool
    archive_action: ArchiveAction
    archive_delivered: bool
    daily_status: PerformanceStatus
    message: str


class TeamSummaryCell(BaseSchema):
    value: float
    display: str
    status: PerformanceStatus


class TeamSummaryRow(BaseSchema):
    name: str
    calls: TeamSummaryCell
    bookings: TeamSummaryCell
    attendance: TeamSummaryCell
    conversion_rate: TeamSummaryCell
    last_update: Optional[datetime] = None


class TargetsResponse(BaseSchema):
    calls_daily: int
    calls_weekly: int
    calls_monthly: int
    bookings_daily: int
    bookings_weekly: int
    bookings_monthly: int
    attendance_daily: int
    attendance_weekly: int
    attendance_monthly: int
    conv_rate_target: float
    attendance_rate_target: float
    threshold_green: float
    threshold_yellow: float
