from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator

DeviceStatus = Literal["pending", "active", "inactive", "revoked"]


class DeviceCreate(BaseModel):
    serial_number: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=150)

    @field_validator("serial_number", "name", mode="before")
    @classmethod
    def strip_text(cls, value):
        return value.strip() if isinstance(value, str) else value


class DeviceToggle(BaseModel):
    active: bool


class DeviceOut(BaseModel):
    id: str
    serial_number: str
    name: str
    owner_user_id: str
    owner_email: Optional[str] = None
    owner_name: Optional[str] = None
    status: DeviceStatus
    is_active: bool
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None
    approved_by_email: Optional[str] = None
    last_seen_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class DeviceStats(BaseModel):
    total_devices: int = 0
    active_devices: int = 0
    pending_devices: int = 0
    total_logs: int = 0
