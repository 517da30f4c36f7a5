from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.core.auth import CurrentUser, get_current_user, require_admin
from src.core.db import get_db
from src.core.errors import ConflictError, NotFoundError
from src.models.device import DeviceCreate, DeviceOut, DeviceStats, DeviceToggle
from src.services.device.devices import (
    approve_device,
    get_device_stats,
    list_devices,
    register_device,
    revoke_device,
    set_device_active,
)
from src.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/devices", tags=["Devices"])


def _http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.get("", response_model=List[DeviceOut])
def list_devices_route(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return list_devices(db, user)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=DeviceOut)
def register_device_route(
    payload: DeviceCreate,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return register_device(db, user, payload)
    except ConflictError as exc:
        raise _http_error(exc) from exc


@router.get("/stats", response_model=DeviceStats)
def device_stats_route(
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_device_stats(db, user)


@router.patch("/{device_id}/active", response_model=DeviceOut)
def toggle_device_route(
    device_id: str,
    payload: DeviceToggle,
    user: CurrentUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return set_device_active(db, user, device_id, payload.active)
    except (NotFoundError, ConflictError) as exc:
        raise _http_error(exc) from exc


@router.post("/{device_id}/approve", response_model=DeviceOut)
def approve_device_route(
    device_id: str,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return approve_device(db, admin, device_id)
    except (NotFoundError, ConflictError) as exc:
        raise _http_error(exc) from exc


@router.post("/{device_id}/revoke", response_model=DeviceOut)
def revoke_device_route(
    device_id: str,
    admin: CurrentUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    try:
        return revoke_device(db, admin, device_id)
    except NotFoundError as exc:
        raise _http_error(exc) from exc
