from sqlalchemy import Column, String, Boolean, Date, DateTime, JSON, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from src.core.db import Base


class Livestock(Base):
    __tablename__ = "livestocks"

    rfid = Column(String, primary_key=True)
    user_id = Column(String, nullable=False)
    owner_email = Column(String, nullable=True)
    name = Column(String, nullable=True)
    breed = Column(String, nullable=True)
    dob = Column(Date, nullable=True)
    sex = Column(String, nullable=True)
    species = Column(String, nullable=True)
    photo_url = Column(String, nullable=True)
    vaccines = Column(JSON().with_variant(JSONB, "postgresql"), nullable=True)
    is_public = Column(Boolean, nullable=False, default=False)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
        onupdate=func.now(),
    )

    # Relationships
    weights = relationship(
        "Weight", back_populates="livestock", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_livestocks_user_id", "user_id"),
        Index("idx_livestocks_is_public", "is_public"),
    )
