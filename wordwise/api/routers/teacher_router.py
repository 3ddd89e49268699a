"""
Teacher router.

Dashboard roll-ups computed by the stats aggregator.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from wordwise.api.dependencies import get_services
from wordwise.api.schemas import DashboardOut, StudentStatsOut, SystemStatsOut
from wordwise.bootstrap import Services

router = APIRouter()


@router.get("/dashboard", response_model=DashboardOut, summary="System dashboard")
def get_dashboard(services: Services = Depends(get_services)) -> DashboardOut:
    return DashboardOut(system_stats=SystemStatsOut.from_stats(services.stats.system_stats()))


@router.get("/students", response_model=list[StudentStatsOut], summary="Per-student stats")
def get_student_stats(services: Services = Depends(get_services)) -> list[StudentStatsOut]:
    return [StudentStatsOut.from_stats(s) for s in services.stats.student_stats()]
