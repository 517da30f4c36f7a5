from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from src.core.auth import CurrentUser
from src.core.errors import ConflictError, NotFoundError
from src.models.livestock import LivestockCreate, LivestockOut, LivestockUpdate
from src.models.schema.livestock import Livestock as LivestockModel
from src.utils.logging import get_logger

logger = get_logger(__name__)


def register_livestock(
    db: Session, user: CurrentUser, payload: LivestockCreate
) -> LivestockOut:
    """
    Register an animal under the caller.

    Raises:
        ConflictError: the RFID tag is already registered
    """
    existing = (
        db.query(LivestockModel).filter(LivestockModel.rfid == payload.rfid).first()
    )
    if existing:
        logger.warning(f"Livestock with rfid {payload.rfid} already exists")
        raise ConflictError("Livestock with this RFID already exists")

    animal = LivestockModel(
        rfid=payload.rfid,
        user_id=user.id,
        owner_email=user.email,
        name=payload.name,
        breed=payload.breed,
        dob=payload.dob,
        sex=payload.sex,
        species=payload.species,
        photo_url=payload.photo_url,
        vaccines=list(payload.vaccines),
        is_public=payload.is_public,
    )

    try:
        db.add(animal)
        db.commit()
        db.refresh(animal)
    except SQLAlchemyError:
        db.rollback()
        raise

    logger.info(f"Registered livestock {animal.rfid} for {user.id}")
    return LivestockOut.model_validate(animal)


def update_livestock(
    db: Session, user: CurrentUser, rfid: str, payload: LivestockUpdate
) -> LivestockOut:
    """Owner-only update of photo, vaccines and sharing."""
    animal = (
        db.query(LivestockModel)
        .filter(LivestockModel.rfid == rfid)
        .filter(LivestockModel.user_id == user.id)
        .first()
    )
    if animal is None:
        raise NotFoundError(f"Livestock {rfid} not found")

    changes = payload.model_dump(exclude_unset=True)
    for field, value in changes.items():
        setattr(animal, field, value)

    try:
        db.commit()
        db.refresh(animal)
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Failed to update livestock {rfid}: {e}")
        raise

    logger.info(f"Updated livestock {rfid}: {sorted(changes)}")
    return LivestockOut.model_validate(animal)
