import pytest
from datetime import date, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from teamwise.db.models import Base
from teamwise.services.scheduling.types import (
    AvailabilityOverride,
    EmploymentType,
    OverrideShiftType,
    OverrideType,
    ScheduleCycle,
    Shift,
    ShiftRole,
    ShiftStatus,
    ShiftType,
    Therapist,
    WorkPattern,
    WorksDowMode,
)


def get_test_sunday() -> date:
    # returns a fixed Sunday for deterministic tests (2026-03-01)
    return date(2026, 3, 1)


def day_of_week(offset: int) -> date:
    # 0 = Sunday of the test week ... 6 = Saturday
    return get_test_sunday() + timedelta(days=offset)


def make_therapist(therapist_id: int, name: str = "", **kwargs) -> Therapist:
    return Therapist(id=therapist_id, full_name=name or f"Therapist {therapist_id}", **kwargs)


def make_shift(therapist_id: int, on_date: date, shift_type: ShiftType = ShiftType.DAY,
               cycle_id: int = 1, **kwargs) -> Shift:
    return Shift(cycle_id=cycle_id, therapist_id=therapist_id, date=on_date, shift_type=shift_type, **kwargs)


def force_override(therapist_id: int, on_date: date, override_type: OverrideType,
                   shift_type: OverrideShiftType = OverrideShiftType.BOTH, note: str = None) -> AvailabilityOverride:
    return AvailabilityOverride(
        cycle_id=1,
        therapist_id=therapist_id,
        date=on_date,
        shift_type=shift_type,
        override_type=override_type,
        note=note,
    )


@pytest.fixture
def cycle() -> ScheduleCycle:
    # one Sunday-Saturday week
    return ScheduleCycle(id=1, label="Week of Mar 1", start_date=day_of_week(0), end_date=day_of_week(6))


@pytest.fixture
def monday_pattern() -> WorkPattern:
    return WorkPattern(therapist_id=1, works_dow=[1], works_dow_mode=WorksDowMode.HARD)


@pytest.fixture
def day_team() -> list[Therapist]:
    # five day-shift therapists, the first two lead-eligible
    return [
        make_therapist(1, "Avery", is_lead_eligible=True),
        make_therapist(2, "Blake", is_lead_eligible=True),
        make_therapist(3, "Casey"),
        make_therapist(4, "Devon"),
        make_therapist(5, "Emery"),
    ]


@pytest.fixture
def night_team() -> list[Therapist]:
    return [
        make_therapist(11, "Nico", shift_type=ShiftType.NIGHT, is_lead_eligible=True),
        make_therapist(12, "Oakley", shift_type=ShiftType.NIGHT),
        make_therapist(13, "Parker", shift_type=ShiftType.NIGHT),
    ]


@pytest.fixture
def prn_therapist() -> Therapist:
    return make_therapist(20, "Quinn", employment_type=EmploymentType.PRN, preferred_weekdays=[2])


@pytest.fixture
def full_slot() -> list[Shift]:
    # three scheduled day shifts on Monday, one designated lead
    return [
        make_shift(1, day_of_week(1), role=ShiftRole.LEAD),
        make_shift(3, day_of_week(1)),
        make_shift(4, day_of_week(1), status=ShiftStatus.ON_CALL),
    ]


@pytest.fixture
def db():
    # fresh in-memory SQLite schema per test
    engine = create_engine("sqlite://")
    Base.metadata.create_all(engine)
    session = sessionmaker(bind=engine, expire_on_commit=False)()
    yield session
    session.close()
    engine.dispose()
