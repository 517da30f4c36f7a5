from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from src.core.db import Base


class Weight(Base):
    __tablename__ = "weights"

    id = Column(Integer, primary_key=True, autoincrement=True)
    rfid = Column(String, ForeignKey("livestocks.rfid"), nullable=False)
    device_id = Column(String, ForeignKey("devices.id"), nullable=True)
    weight = Column(Float, nullable=True)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # Relationships
    livestock = relationship("Livestock", back_populates="weights")
    device = relationship("Device", back_populates="weights")

    __table_args__ = (
        Index("idx_weights_rfid", "rfid"),
        Index("idx_weights_device_id", "device_id"),
        Index("idx_weights_created_at", "created_at"),
    )
