from typing import List, Union

from sqlalchemy.orm import Session

from src.core.auth import CurrentUser
from src.core.errors import NotFoundError
from src.domain.growth_log import attach_status_and_age, newest_first
from src.domain.log_stats import (
    dashboard_stats,
    data_log_stats,
    global_stats,
    latest_per_animal,
    monthly_series,
)
from src.models.weight_log import (
    DashboardStats,
    DataLogStats,
    EnrichedLogEntry,
    GlobalStats,
    MonthlyPoint,
)
from src.services.dashboard.data_fetcher import fetch_livestock, fetch_weight_readings
from src.utils.logging import get_logger

logger = get_logger(__name__)

UNKNOWN_DEVICE = "Unknown"


def get_logs(db: Session, user: CurrentUser) -> List[EnrichedLogEntry]:
    """Every enriched reading of the caller's livestock, newest first."""
    readings = fetch_weight_readings(db, owner_id=user.id)
    return newest_first(attach_status_and_age(readings))


def get_animal_logs(db: Session, user: CurrentUser, rfid: str) -> List[EnrichedLogEntry]:
    readings = fetch_weight_readings(db, owner_id=user.id, rfid=rfid)
    return newest_first(attach_status_and_age(readings))


def get_log_stats(db: Session, user: CurrentUser) -> DataLogStats:
    return data_log_stats(get_logs(db, user))


def get_latest_livestock(db: Session, user: CurrentUser) -> List[EnrichedLogEntry]:
    """One row per owned animal, including animals never weighed."""
    livestock = fetch_livestock(db, owner_id=user.id)
    return latest_per_animal(get_logs(db, user), livestock)


def get_dashboard_series(
    db: Session, user: CurrentUser, max_months: Union[int, str] = 12
) -> List[MonthlyPoint]:
    livestock = fetch_livestock(db, owner_id=user.id)
    created = [animal.created_at for animal in livestock if animal.created_at]
    entries = attach_status_and_age(fetch_weight_readings(db, owner_id=user.id))
    series = monthly_series(created, entries, max_months)
    logger.info(f"Built {len(series)} monthly points for user {user.id}")
    return series


def get_dashboard_stats(db: Session, user: CurrentUser) -> DashboardStats:
    return dashboard_stats(get_dashboard_series(db, user, max_months=3))


def get_public_logs(db: Session) -> List[EnrichedLogEntry]:
    readings = fetch_weight_readings(db, public_only=True)
    return newest_first(attach_status_and_age(readings))


def get_public_latest_livestock(db: Session) -> List[EnrichedLogEntry]:
    return latest_per_animal(get_public_logs(db))


def get_public_stats(db: Session) -> GlobalStats:
    logs = get_public_logs(db)
    return global_stats(logs, latest_per_animal(logs))


def get_public_animal_logs(db: Session, rfid: str) -> List[EnrichedLogEntry]:
    """
    Enriched readings of one shared animal, newest first.

    Raises:
        NotFoundError: the animal has no shared readings
    """
    readings = fetch_weight_readings(db, public_only=True, rfid=rfid)
    if not readings:
        raise NotFoundError(f"Shared livestock '{rfid}' not found")

    entries = newest_first(attach_status_and_age(readings))
    for entry in entries:
        if entry.device_serial is None:
            entry.device_serial = UNKNOWN_DEVICE
    return entries
