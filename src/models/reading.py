from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field


class WeightReadingPayload(BaseModel):
    """Body posted by a weighing device."""

    rfid: str = Field(..., min_length=1)
    weight: float = Field(..., gt=0, allow_inf_nan=False)
    # A device identifies itself by id or by serial number
    device_id: Optional[UUID] = None
    device_serial: Optional[str] = Field(default=None, min_length=1)
    measured_at: Optional[datetime] = None


class WeightReadingAccepted(BaseModel):
    success: bool = True
    weight_id: int
