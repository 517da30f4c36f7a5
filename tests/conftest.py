import os
from datetime import date, datetime, timezone
from typing import Dict, Iterator

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("IOT_API_KEY", "test-iot-key")
os.environ.setdefault("TIMEZONE", "UTC")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from src.core.auth import CurrentUser, get_current_user  # noqa: E402
from src.core.db import Base, get_db  # noqa: E402
from src.main import app  # noqa: E402
from src.models.schema import Device, Livestock, Weight  # noqa: E402

FARMER = CurrentUser(id="farmer-1", email="farmer@example.com")
OTHER_FARMER = CurrentUser(id="farmer-2", email="other@example.com")
ADMIN = CurrentUser(id="admin-1", email="admin@example.com", role="admin")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session(session_factory) -> Iterator[Session]:
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def acting_user() -> Dict[str, CurrentUser]:
    return {"user": FARMER}


@pytest.fixture
def api_client(session_factory, acting_user) -> Iterator[TestClient]:
    def override_get_db():
        db = session_factory()
        try:
            yield db
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_user] = lambda: acting_user["user"]
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


def add_livestock(
    session: Session,
    rfid: str,
    owner: CurrentUser = FARMER,
    is_public: bool = False,
    dob: date = date(2023, 1, 1),
    created_at: datetime = datetime(2024, 1, 5, tzinfo=timezone.utc),
    name: str | None = None,
) -> Livestock:
    animal = Livestock(
        rfid=rfid,
        user_id=owner.id,
        owner_email=owner.email,
        name=name or f"Animal {rfid}",
        breed="Bali",
        dob=dob,
        sex="Female",
        species="Cow",
        vaccines=["Anthrax"],
        is_public=is_public,
        created_at=created_at,
    )
    session.add(animal)
    session.commit()
    return animal


def add_device(
    session: Session,
    device_id: str = "6f1d3c52-8a41-4f0e-9d8e-1b2c3d4e5f60",
    serial: str = "SCALE-001",
    owner: CurrentUser = FARMER,
    status: str = "active",
    is_active: bool = True,
) -> Device:
    device = Device(
        id=device_id,
        serial_number=serial,
        name="Barn scale",
        owner_user_id=owner.id,
        owner_email=owner.email,
        status=status,
        is_active=is_active,
    )
    session.add(device)
    session.commit()
    return device


def add_weight(
    session: Session,
    rfid: str,
    weight: float | None,
    created_at: datetime,
    device_id: str | None = None,
) -> Weight:
    record = Weight(rfid=rfid, weight=weight, created_at=created_at, device_id=device_id)
    session.add(record)
    session.commit()
    return record
