from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.core.db import get_db
from src.core.errors import NotFoundError
from src.models.weight_log import EnrichedLogEntry, GlobalStats
from src.services.dashboard.growth_logs import (
    get_public_animal_logs,
    get_public_latest_livestock,
    get_public_logs,
    get_public_stats,
)

router = APIRouter(prefix="/public", tags=["Public"])


@router.get("/logs", response_model=List[EnrichedLogEntry])
def public_logs_route(db: Session = Depends(get_db)):
    return get_public_logs(db)


@router.get("/livestock", response_model=List[EnrichedLogEntry])
def public_livestock_route(db: Session = Depends(get_db)):
    return get_public_latest_livestock(db)


@router.get("/stats", response_model=GlobalStats)
def public_stats_route(db: Session = Depends(get_db)):
    return get_public_stats(db)


@router.get("/livestock/{rfid}", response_model=List[EnrichedLogEntry])
def public_animal_logs_route(rfid: str, db: Session = Depends(get_db)):
    try:
        return get_public_animal_logs(db, rfid)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
