from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.core.auth import CurrentUser, get_current_user
from src.core.db import get_db
from src.core.errors import ConflictError, NotFoundError
from src.models.livestock import LivestockCreate, LivestockOut, LivestockUpdate
from src.models.weight_log import EnrichedLogEntry
from src.services.dashboard.growth_logs import get_latest_livestock
from src.services.livestock.livestock import register_livestock, update_livestock
from src.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/livestock", tags=["Livestock"])


@router.get("", response_model=List[EnrichedLogEntry])
def list_livestock_route(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Latest reading per owned animal; animals never weighed are included."""
    return get_latest_livestock(db, user)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=LivestockOut)
def register_livestock_route(
    payload: LivestockCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return register_livestock(db, user, payload)
    except ConflictError as exc:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc)) from exc


@router.patch("/{rfid}", response_model=LivestockOut)
def update_livestock_route(
    rfid: str,
    payload: LivestockUpdate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return update_livestock(db, user, rfid, payload)
    except NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
