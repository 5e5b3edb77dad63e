from __future__ import annotations

from datetime import date
from typing import List

from fastapi import APIRouter, Depends

from src.api.dependencies import get_performance_service
from src.schemas.performance import (
    EmployeeDashboard,
    PerformanceSubmissionRequest,
    SubmissionResult,
    TargetsResponse,
    TeamSummaryRow,
)
from src.services.performance_service import PerformanceService
from src.shared.response import Meta, ResponseEnvelope


router = APIRouter(prefix="/performance", tags=["performance"])

PERFORMANCE_CALCULATION_VERSION = "v1"


def _build_meta(time_window: str, source: str = "supabase") -> Meta:
    return Meta(
        as_of_date=date.today().isoformat(),
        source=source,
        time_window=time_window,
        calculation_version=PERFORMANCE_CALCULATION_VERSION,
    )


@router.get("/employees")
def performance_roster(
    service: PerformanceService = Depends(get_performance_service),
) -> ResponseEnvelope[List[str]]:
    return ResponseEnvelope(data=service.list_roster(), meta=_build_meta("na", source="config"))


@router.get("/targets")
def performance_targets(
    service: PerformanceService = Depends(get_performance_service),
) -> ResponseEnvelope[TargetsResponse]:
    return ResponseEnvelope(data=service.get_targets(), meta=_build_meta("na", source="config"))


@router.get("/summary")
def performance_summary(
    service: PerformanceService = Depends(get_performance_service),
) -> ResponseEnvelope[List[TeamSummaryRow]]:
    return ResponseEnvelope(data=service.get_team_summary(), meta=_build_meta("daily"))


@router.get("/employees/{name}")
def performance_dashboard(
    name: str,
    service: PerformanceService = Depends(get_performance_service),
) -> ResponseEnvelope[EmployeeDashboard]:
    return ResponseEnvelope(
        data=service.get_dashboard(name),
        meta=_build_meta("daily,weekly,monthly"),
    )


@router.post("/submissions")
def performance_submit(
    request: PerformanceSubmissionRequest,
    service: PerformanceService = Depends(get_performance_service),
) -> ResponseEnvelope[SubmissionResult]:
    return ResponseEnvelope(data=service.submit(request), meta=_build_meta("daily"))
