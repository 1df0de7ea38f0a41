import pytest
from datetime import date
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from teamwise.api.deps import get_db
from teamwise.db.models import Base, ScheduleCycles, Therapists
from teamwise.main import app
from teamwise.services.scheduling.types import ShiftType


@pytest.fixture
def session_factory():
    # one shared in-memory connection so every request sees the same data
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def roster(db):
    # one-day cycle (Monday 2026-03-02) with three day and three night therapists
    db.add_all([
        ScheduleCycles(id=1, label="Monday", start_date=date(2026, 3, 2), end_date=date(2026, 3, 2)),
        Therapists(id=1, full_name="Avery", is_lead_eligible=True),
        Therapists(id=2, full_name="Blake"),
        Therapists(id=3, full_name="Casey"),
        Therapists(id=11, full_name="Nico", shift_type=ShiftType.NIGHT, is_lead_eligible=True),
        Therapists(id=12, full_name="Oakley", shift_type=ShiftType.NIGHT),
        Therapists(id=13, full_name="Parker", shift_type=ShiftType.NIGHT),
    ])
    db.commit()
    return db
