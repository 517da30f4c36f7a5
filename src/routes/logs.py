from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.core.auth import CurrentUser, get_current_user
from src.core.db import get_db
from src.models.weight_log import DataLogStats, EnrichedLogEntry
from src.services.dashboard.growth_logs import get_animal_logs, get_log_stats, get_logs

router = APIRouter(prefix="/logs", tags=["Data Logs"])


@router.get("", response_model=List[EnrichedLogEntry])
def get_logs_route(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_logs(db, user)


@router.get("/stats", response_model=DataLogStats)
def get_log_stats_route(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_log_stats(db, user)


@router.get("/{rfid}", response_model=List[EnrichedLogEntry])
def get_animal_logs_route(
    rfid: str,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    logs = get_animal_logs(db, user, rfid)
    if not logs:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No logs for livestock '{rfid}'",
        )
    return logs
