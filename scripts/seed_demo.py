"""
Seed script for the Teamwise development database.

- 8 day-shift and 6 night-shift therapists (mixed full time / part time / PRN)
- Work patterns for most of them, two on alternating weekends
- One draft 6-week cycle starting next Sunday
- A handful of manager overrides
- No shifts (clean slate for auto-generate)

Run with: python -m scripts.seed_demo
"""

import sys
from datetime import date, timedelta
from sqlalchemy import text

from teamwise.db.database import SessionLocal, engine
from teamwise.db.models import (
    AvailabilityOverrides,
    Base,
    ScheduleCycles,
    Therapists,
    WorkPatterns,
)
from teamwise.services.scheduling.types import (
    EmploymentType,
    OverrideShiftType,
    OverrideSource,
    OverrideType,
    ShiftType,
)

CYCLE_ID = 1


def truncate_tables(db):
    """Clear seeded tables in dependency order."""
    print("Truncating tables...")

    for table in ["shifts", "availability_overrides", "work_patterns", "schedule_cycles", "therapists"]:
        db.execute(text(f"TRUNCATE TABLE {table} RESTART IDENTITY CASCADE;"))

    db.commit()
    print("All tables truncated.")


def reset_sequences(db):
    """Reset sequences to start after our seeded IDs."""
    print("Resetting sequences...")

    for table in ["therapists", "schedule_cycles", "availability_overrides", "shifts"]:
        db.execute(text(f"SELECT setval('{table}_id_seq', (SELECT COALESCE(MAX(id), 1) FROM {table}));"))

    db.commit()
    print("Sequences reset.")


def get_next_sunday():
    """Sunday on or after today (weeks run Sunday-Saturday)."""
    today = date.today()
    return today + timedelta(days=(6 - today.weekday()) % 7)


def seed_therapists(db):
    print("Seeding therapists...")

    # (id, name, shift, employment, lead eligible, preferred weekdays 0=Sun)
    therapists = [
        (1, "Avery Brooks", ShiftType.DAY, EmploymentType.FULL_TIME, True, [1, 2, 3]),
        (2, "Blake Carter", ShiftType.DAY, EmploymentType.FULL_TIME, True, []),
        (3, "Casey Diaz", ShiftType.DAY, EmploymentType.FULL_TIME, False, [4, 5]),
        (4, "Devon Ellis", ShiftType.DAY, EmploymentType.FULL_TIME, False, []),
        (5, "Emery Flores", ShiftType.DAY, EmploymentType.PART_TIME, True, [0, 6]),
        (6, "Finley Grant", ShiftType.DAY, EmploymentType.FULL_TIME, False, []),
        (7, "Gray Harper", ShiftType.DAY, EmploymentType.PART_TIME, False, [2]),
        (8, "Harley Irwin", ShiftType.DAY, EmploymentType.PRN, False, [3]),
        (11, "Nico Ortiz", ShiftType.NIGHT, EmploymentType.FULL_TIME, True, []),
        (12, "Oakley Park", ShiftType.NIGHT, EmploymentType.FULL_TIME, False, [5, 6]),
        (13, "Parker Quinn", ShiftType.NIGHT, EmploymentType.FULL_TIME, True, []),
        (14, "Quinn Reyes", ShiftType.NIGHT, EmploymentType.FULL_TIME, False, []),
        (15, "Reese Shaw", ShiftType.NIGHT, EmploymentType.PART_TIME, False, [0]),
        (16, "Sage Turner", ShiftType.NIGHT, EmploymentType.PRN, False, [6]),
    ]

    for therapist_id, name, shift_type, employment, lead, preferred in therapists:
        db.add(Therapists(
            id=therapist_id,
            full_name=name,
            shift_type=shift_type,
            employment_type=employment,
            is_lead_eligible=lead,
            preferred_work_days=preferred,
        ))

    db.commit()
    print(f"Seeded {len(therapists)} therapists.")


def seed_work_patterns(db, anchor_saturday):
    print("Seeding work patterns...")

    patterns = [
        dict(therapist_id=1, works_dow=[1, 2, 3, 4, 5], offs_dow=[], works_dow_mode="soft"),
        dict(therapist_id=3, works_dow=[3, 4, 5], offs_dow=[0], works_dow_mode="hard"),
        dict(therapist_id=4, works_dow=[], offs_dow=[], weekend_rotation="every_other",
             weekend_anchor_date=anchor_saturday),
        dict(therapist_id=6, works_dow=[], offs_dow=[], weekend_rotation="every_other",
             weekend_anchor_date=anchor_saturday + timedelta(days=7)),
        dict(therapist_id=8, works_dow=[3], offs_dow=[], works_dow_mode="hard"),
        dict(therapist_id=12, works_dow=[4, 5, 6], offs_dow=[1], works_dow_mode="soft", shift_preference="night"),
        dict(therapist_id=16, works_dow=[6], offs_dow=[], works_dow_mode="hard", shift_preference="night"),
    ]

    for pattern in patterns:
        db.add(WorkPatterns(**pattern))

    db.commit()
    print(f"Seeded {len(patterns)} work patterns.")


def seed_cycle(db, start):
    print("Seeding schedule cycle...")

    end = start + timedelta(weeks=6, days=-1)
    db.add(ScheduleCycles(id=CYCLE_ID, label=f"{start:%b %d} - {end:%b %d}", start_date=start, end_date=end))
    db.commit()
    print(f"Seeded cycle {start} to {end}.")


def seed_overrides(db, start):
    print("Seeding availability overrides...")

    overrides = [
        (2, start + timedelta(days=2), OverrideShiftType.BOTH, OverrideType.FORCE_OFF, "Conference", OverrideSource.THERAPIST),
        (5, start + timedelta(days=10), OverrideShiftType.DAY, OverrideType.FORCE_ON, "Covering holiday", OverrideSource.MANAGER),
        (13, start + timedelta(days=4), OverrideShiftType.NIGHT, OverrideType.FORCE_OFF, None, OverrideSource.THERAPIST),
    ]

    for therapist_id, on_date, shift_type, override_type, note, source in overrides:
        db.add(AvailabilityOverrides(
            cycle_id=CYCLE_ID,
            therapist_id=therapist_id,
            date=on_date,
            shift_type=shift_type,
            override_type=override_type,
            note=note,
            source=source,
        ))

    db.commit()
    print(f"Seeded {len(overrides)} overrides.")


def main():
    """Main seed function."""
    print("\n" + "="*50)
    print("Teamwise Database Seeder (demo)")
    print("="*50 + "\n")

    response = input("This will DELETE ALL EXISTING DATA. Continue? (yes/no): ")
    if response.lower() != "yes":
        print("Aborted.")
        sys.exit(0)

    Base.metadata.create_all(engine)
    db = SessionLocal()
    start = get_next_sunday()

    try:
        truncate_tables(db)

        seed_therapists(db)
        seed_work_patterns(db, anchor_saturday=start + timedelta(days=6))
        seed_cycle(db, start)
        seed_overrides(db, start)

        reset_sequences(db)

        print("\n" + "="*50)
        print("Seeding complete!")
        print("="*50)
        print(f"\nDraft cycle id={CYCLE_ID}; run auto-generate with:")
        print(f"  POST /api/v1/cycles/{CYCLE_ID}/auto-generate")
        print("="*50 + "\n")

    except Exception as e:
        db.rollback()
        print(f"\nError during seeding: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
