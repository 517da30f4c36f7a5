from datetime import date, datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

Species = Literal["Cow", "Buffalo", "Goat", "Sheep", "Pig"]
Sex = Literal["Male", "Female"]
Vaccine = Literal["Anthrax", "SE", "PMK", "Brucellosis", "Enterotoxemia", "Blackleg"]


def _unique(values: Optional[List[str]]) -> List[str]:
    return list(dict.fromkeys(values or []))


class LivestockCreate(BaseModel):
    rfid: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=150)
    breed: str = Field(..., min_length=1, max_length=150)
    dob: date
    species: Species
    sex: Sex
    vaccines: List[Vaccine] = Field(default_factory=list)
    photo_url: Optional[str] = None
    is_public: bool = False

    @field_validator("rfid", "name", "breed", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("vaccines")
    @classmethod
    def dedupe_vaccines(cls, value):
        return _unique(value)


class LivestockUpdate(BaseModel):
    photo_url: Optional[str] = None
    vaccines: Optional[List[Vaccine]] = None
    is_public: Optional[bool] = None

    @field_validator("vaccines")
    @classmethod
    def dedupe_vaccines(cls, value):
        return None if value is None else _unique(value)

    @field_validator("is_public", mode="before")
    @classmethod
    def reject_null_sharing(cls, value):
        # Omit the field to leave sharing unchanged
        if value is None:
            raise ValueError("is_public cannot be null")
        return value


class LivestockOut(BaseModel):
    rfid: str
    user_id: str
    owner_email: Optional[str] = None
    name: Optional[str] = None
    breed: Optional[str] = None
    dob: Optional[date] = None
    sex: Optional[str] = None
    species: Optional[str] = None
    photo_url: Optional[str] = None
    vaccines: List[str] = Field(default_factory=list)
    is_public: bool = False
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

    @field_validator("vaccines", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return value or []

    @field_validator("created_at")
    @classmethod
    def assume_utc(cls, value):
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value
