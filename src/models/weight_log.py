from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class TrendStatus(str, Enum):
    gain = "gain"
    stable = "stable"
    loss = "loss"


class LifeStage(str, Enum):
    infant = "infant"
    juvenile = "juvenile"
    adult = "adult"


class AgeParts(BaseModel):
    years: int = 0
    months: int = 0
    days: int = 0


class AnimalSnapshot(BaseModel):
    """Livestock fields denormalised onto a reading at read time."""

    name: Optional[str] = None
    breed: Optional[str] = None
    dob: Optional[Union[date, str]] = None
    sex: Optional[str] = None
    species: Optional[str] = None
    photo_url: Optional[str] = None
    vaccines: Optional[List[str]] = None
    is_public: Optional[bool] = None
    owner_email: Optional[str] = None


class RawWeightReading(BaseModel):
    id: int
    animal_id: str = Field(..., min_length=1)
    weight: Optional[float] = None
    recorded_at: datetime
    device_serial: Optional[str] = None
    animal: Optional[AnimalSnapshot] = None

    @field_validator("recorded_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        # Some stores hand back naive timestamps; they are stored as UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class EnrichedLogEntry(BaseModel):
    id: int
    animal_id: str
    weight: Optional[float] = None
    recorded_at: datetime
    device_serial: Optional[str] = None

    name: Optional[str] = None
    breed: Optional[str] = None
    dob: Optional[str] = None
    sex: Optional[str] = None
    species: Optional[str] = None
    photo_url: Optional[str] = None
    vaccines: List[str] = Field(default_factory=list)
    is_public: bool = False
    owner_email: Optional[str] = None

    trend_status: TrendStatus = TrendStatus.stable
    delta: Optional[float] = None
    age: AgeParts = Field(default_factory=AgeParts)
    life_stage: Optional[LifeStage] = None


class DataLogStats(BaseModel):
    total_logs: int
    highest_weight: Optional[float] = None
    stuck_loss_count: int
    logs_this_month: int


class GlobalStats(BaseModel):
    total_shared_livestock: int
    global_avg_weight: Optional[float] = None
    highest_recorded_weight: Optional[float] = None
    total_logs: int


class MonthlyPoint(BaseModel):
    month_key: str
    label: str
    total_livestock: int
    avg_weight: Optional[float] = None
    stuck_loss_count: int
    total_livestock_pct: float = 0.0
    avg_weight_pct: float = 0.0
    stuck_loss_pct: float = 0.0
    health_score: float = 0.0
    health_score_delta: float = 0.0


class DashboardStats(BaseModel):
    total_livestock: int = 0
    total_livestock_diff: int = 0
    total_livestock_pct: Optional[float] = None

    avg_weight: Optional[float] = None
    avg_weight_diff: Optional[float] = None
    avg_weight_pct: Optional[float] = None

    stuck_loss_count: int = 0
    stuck_loss_diff: int = 0
    stuck_loss_pct: Optional[float] = None

    health_score_current: Optional[float] = None
    health_score_prev: Optional[float] = None
