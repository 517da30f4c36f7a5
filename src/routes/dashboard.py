from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session

from src.core.auth import CurrentUser, get_current_user
from src.core.db import get_db
from src.models.weight_log import DashboardStats, MonthlyPoint
from src.services.dashboard.growth_logs import get_dashboard_series, get_dashboard_stats

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("/series", response_model=List[MonthlyPoint])
def dashboard_series_route(
    months: str = Query(default="12", description="Trailing months, or 'all'"),
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if months != "all" and not (months.isdigit() and int(months) > 0):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="months must be a positive integer or 'all'",
        )
    return get_dashboard_series(db, user, months if months == "all" else int(months))


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats_route(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_dashboard_stats(db, user)
