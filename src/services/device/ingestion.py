from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.errors import DeviceNotActiveError, NotFoundError
from src.models.reading import WeightReadingPayload
from src.models.schema.device import Device as DeviceModel
from src.models.schema.livestock import Livestock as LivestockModel
from src.models.schema.weight import Weight as WeightModel
from src.utils.logging import get_logger

logger = get_logger(__name__)


def _is_usable(device: Optional[DeviceModel]) -> bool:
    return device is not None and device.is_active and device.status == "active"


def resolve_device(db: Session, payload: WeightReadingPayload) -> Optional[DeviceModel]:
    """
    Find the submitting device by id, falling back to its serial number.

    Returns:
        The device, or None when the payload names no device at all

    Raises:
        DeviceNotActiveError: the named device is unknown or not active
    """
    if payload.device_id is not None:
        device = (
            db.query(DeviceModel).filter(DeviceModel.id == str(payload.device_id)).first()
        )
    elif payload.device_serial:
        device = (
            db.query(DeviceModel)
            .filter(DeviceModel.serial_number == payload.device_serial)
            .first()
        )
    else:
        return None

    if not _is_usable(device):
        logger.warning(
            f"Rejected reading from device id={payload.device_id} "
            f"serial={payload.device_serial}"
        )
        raise DeviceNotActiveError("Device not found or not active")
    return device


def ingest_weight(db: Session, payload: WeightReadingPayload) -> int:
    """
    Store one weight reading posted by a device.

    Args:
        db: Database session
        payload: Validated device payload

    Returns:
        int: id of the stored weight row

    Raises:
        DeviceNotActiveError: unknown or inactive device
        NotFoundError: no livestock carries the tag
    """
    device = resolve_device(db, payload)

    livestock = (
        db.query(LivestockModel).filter(LivestockModel.rfid == payload.rfid).first()
    )
    if livestock is None:
        logger.warning(f"Rejected reading for unknown tag {payload.rfid}")
        raise NotFoundError("Livestock not found")

    created_at = payload.measured_at or datetime.now(timezone.utc)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)

    try:
        record = WeightModel(
            rfid=payload.rfid,
            weight=payload.weight,
            device_id=device.id if device else None,
            created_at=created_at,
        )
        db.add(record)

        if device is not None:
            device.last_seen_at = created_at

        db.commit()
        db.refresh(record)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to insert weight for {payload.rfid}: {e}")
        raise

    logger.info(
        f"Stored weight {record.id} for {payload.rfid}: {payload.weight} kg "
        f"(device={record.device_id})"
    )
    return record.id
