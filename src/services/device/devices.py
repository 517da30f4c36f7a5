import uuid
from datetime import datetime, timezone
from typing import List

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.auth import CurrentUser
from src.core.errors import ConflictError, NotFoundError
from src.models.device import DeviceCreate, DeviceOut, DeviceStats
from src.models.schema.device import Device as DeviceModel
from src.models.schema.livestock import Livestock as LivestockModel
from src.models.schema.weight import Weight as WeightModel
from src.utils.logging import get_logger

logger = get_logger(__name__)


def _visible_device(db: Session, user: CurrentUser, device_id: str) -> DeviceModel:
    query = db.query(DeviceModel).filter(DeviceModel.id == device_id)
    if not user.is_admin:
        query = query.filter(DeviceModel.owner_user_id == user.id)
    device = query.first()
    if device is None:
        raise NotFoundError(f"Device {device_id} not found")
    return device


def _commit(db: Session, device: DeviceModel) -> None:
    device_id = device.id
    try:
        db.commit()
        db.refresh(device)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to save device {device_id}: {e}")
        raise


def register_device(db: Session, user: CurrentUser, payload: DeviceCreate) -> DeviceOut:
    """
    Register a weighing device for the caller.

    New devices start pending and inactive until an admin approves them.

    Raises:
        ConflictError: the serial number is already registered
    """
    existing = (
        db.query(DeviceModel)
        .filter(DeviceModel.serial_number == payload.serial_number)
        .first()
    )
    if existing:
        logger.warning(f"Device with serial {payload.serial_number} already exists")
        raise ConflictError("Device with this serial number already exists")

    device = DeviceModel(
        id=str(uuid.uuid4()),
        serial_number=payload.serial_number,
        name=payload.name,
        owner_user_id=user.id,
        owner_email=user.email,
        status="pending",
        is_active=False,
    )

    db.add(device)
    _commit(db, device)

    logger.info(f"Registered device {device.id} ({device.serial_number}) for {user.id}")
    return DeviceOut.model_validate(device)


def list_devices(db: Session, user: CurrentUser) -> List[DeviceOut]:
    """Admins see every device; farmers see their own. Newest first."""
    query = db.query(DeviceModel)
    if not user.is_admin:
        query = query.filter(DeviceModel.owner_user_id == user.id)

    try:
        devices = query.order_by(DeviceModel.created_at.desc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Error retrieving devices: {e}")
        return []

    return [DeviceOut.model_validate(device) for device in devices]


def set_device_active(
    db: Session, user: CurrentUser, device_id: str, active: bool
) -> DeviceOut:
    """
    Switch an approved device on or off.

    Raises:
        NotFoundError: unknown device or not visible to the caller
        ConflictError: the device is still pending or has been revoked
    """
    device = _visible_device(db, user, device_id)

    if device.status in ("pending", "revoked"):
        raise ConflictError(f"Device in status '{device.status}' cannot be toggled")

    device.is_active = active
    device.status = "active" if active else "inactive"
    _commit(db, device)

    logger.info(f"Device {device_id} set to {device.status}")
    return DeviceOut.model_validate(device)


def approve_device(db: Session, admin: CurrentUser, device_id: str) -> DeviceOut:
    device = _visible_device(db, admin, device_id)

    if device.status != "pending":
        raise ConflictError(f"Only pending devices can be approved, got '{device.status}'")

    device.status = "active"
    device.is_active = True
    device.approved_at = datetime.now(timezone.utc)
    device.approved_by = admin.id
    device.approved_by_email = admin.email
    _commit(db, device)

    logger.info(f"Device {device_id} approved by {admin.id}")
    return DeviceOut.model_validate(device)


def revoke_device(db: Session, admin: CurrentUser, device_id: str) -> DeviceOut:
    device = _visible_device(db, admin, device_id)

    device.status = "revoked"
    device.is_active = False
    _commit(db, device)

    logger.info(f"Device {device_id} revoked by {admin.id}")
    return DeviceOut.model_validate(device)


def get_device_stats(db: Session, user: CurrentUser) -> DeviceStats:
    """
    Device and log counters for the devices page.

    Farmers only count logs that link their own device to their own livestock.
    """
    try:
        devices = db.query(func.count(DeviceModel.id))
        if not user.is_admin:
            devices = devices.filter(DeviceModel.owner_user_id == user.id)

        total_devices = devices.scalar() or 0
        active_devices = devices.filter(DeviceModel.is_active.is_(True)).scalar() or 0
        pending_devices = devices.filter(DeviceModel.status == "pending").scalar() or 0

        logs = db.query(func.count(WeightModel.id))
        if not user.is_admin:
            logs = (
                logs.join(WeightModel.device)
                .join(WeightModel.livestock)
                .filter(DeviceModel.owner_user_id == user.id)
                .filter(LivestockModel.user_id == user.id)
            )
        total_logs = logs.scalar() or 0
    except SQLAlchemyError as e:
        logger.error(f"Error computing device stats: {e}")
        return DeviceStats()

    return DeviceStats(
        total_devices=total_devices,
        active_devices=active_devices,
        pending_devices=pending_devices,
        total_logs=total_logs,
    )
