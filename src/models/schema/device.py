from sqlalchemy import Column, String, Boolean, DateTime, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from src.core.db import Base


class Device(Base):
    __tablename__ = "devices"

    id = Column(String, primary_key=True)
    serial_number = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    owner_user_id = Column(String, nullable=False)
    owner_email = Column(String, nullable=True)
    # pending -> active <-> inactive, any -> revoked
    status = Column(String, nullable=False, default="pending")
    is_active = Column(Boolean, nullable=False, default=False)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    approved_by = Column(String, nullable=True)
    approved_by_email = Column(String, nullable=True)
    last_seen_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        onupdate=func.now(),
    )

    weights = relationship("Weight", back_populates="device")

    __table_args__ = (
        Index("idx_devices_owner_user_id", "owner_user_id"),
        Index("idx_devices_status", "status"),
    )
