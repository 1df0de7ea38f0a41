from teamwise.db.database import Base

# Import models
from teamwise.db.models.therapists import Therapists
from teamwise.db.models.work_patterns import WorkPatterns
from teamwise.db.models.schedule_cycles import ScheduleCycles
from teamwise.db.models.availability_overrides import AvailabilityOverrides
from teamwise.db.models.shifts import Shifts

__all__ = [
    "Base",
    # Models
    "Therapists",
    "WorkPatterns",
    "ScheduleCycles",
    "AvailabilityOverrides",
    "Shifts",
]
