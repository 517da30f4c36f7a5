from typing import List, Optional

from sqlalchemy import desc
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from src.models.livestock import LivestockOut
from src.models.schema.livestock import Livestock as LivestockModel
from src.models.schema.weight import Weight as WeightModel
from src.models.weight_log import RawWeightReading
from src.utils.logging import get_logger

logger = get_logger(__name__)


def _to_raw_reading(record: WeightModel) -> RawWeightReading:
    animal = record.livestock
    return RawWeightReading.model_validate(
        {
            "id": record.id,
            "animal_id": record.rfid,
            "weight": record.weight,
            "recorded_at": record.created_at,
            "device_serial": record.device.serial_number if record.device else None,
            "animal": (
                {
                    "name": animal.name,
                    "breed": animal.breed,
                    "dob": animal.dob,
                    "sex": animal.sex,
                    "species": animal.species,
                    "photo_url": animal.photo_url,
                    "vaccines": animal.vaccines,
                    "is_public": animal.is_public,
                    "owner_email": animal.owner_email,
                }
                if animal
                else None
            ),
        }
    )


def fetch_weight_readings(
    db: Session,
    owner_id: Optional[str] = None,
    public_only: bool = False,
    rfid: Optional[str] = None,
) -> List[RawWeightReading]:
    """
    Fetch weight rows joined with their livestock and device, newest first.

    The visibility predicate is applied in the query: ``owner_id`` restricts
    to that farmer's livestock and ``public_only`` to shared livestock.
    A row that fails validation raises instead of being dropped.

    Args:
        db: Database session
        owner_id: Only readings of livestock owned by this user
        public_only: Only readings of livestock with is_public set
        rfid: Only readings of this animal

    Returns:
        list[RawWeightReading]: validated readings, empty on store errors
    """
    try:
        query = (
            db.query(WeightModel)
            .join(WeightModel.livestock)
            .options(
                joinedload(WeightModel.livestock), joinedload(WeightModel.device)
            )
        )
        if owner_id is not None:
            query = query.filter(LivestockModel.user_id == owner_id)
        if public_only:
            query = query.filter(LivestockModel.is_public.is_(True))
        if rfid is not None:
            query = query.filter(WeightModel.rfid == rfid)

        records = query.order_by(desc(WeightModel.created_at)).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching weight readings: {e}")
        return []

    readings = [_to_raw_reading(record) for record in records]
    logger.info(
        f"Fetched {len(readings)} weight readings "
        f"(owner={owner_id}, public_only={public_only}, rfid={rfid})"
    )
    return readings


def fetch_livestock(
    db: Session, owner_id: Optional[str] = None, public_only: bool = False
) -> List[LivestockOut]:
    """Livestock rows visible under the same predicates, oldest registration first."""
    try:
        query = db.query(LivestockModel)
        if owner_id is not None:
            query = query.filter(LivestockModel.user_id == owner_id)
        if public_only:
            query = query.filter(LivestockModel.is_public.is_(True))
        animals = query.order_by(LivestockModel.created_at.asc()).all()
    except SQLAlchemyError as e:
        logger.error(f"Error fetching livestock: {e}")
        return []

    return [LivestockOut.model_validate(animal) for animal in animals]
