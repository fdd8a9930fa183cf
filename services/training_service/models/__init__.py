"""Training Service models package.

Re-exports all models and enums so that:
  - ``from services.training_service.models import Assignment`` works
  - SQLAlchemy's mapper registry sees every model class on import

IMPORTANT: Every model class AND enum must be listed here.
When adding a new model, add both its import and its __all__ entry.
"""

from services.training_service.models.assignment import (  # noqa: F401
    Assignment,
    Completion,
)
from services.training_service.models.enums import (  # noqa: F401
    AssignmentStatus,
    CellStatus,
    LearningFrequency,
)
from services.training_service.models.learning import LearningItem  # noqa: F401
from services.training_service.models.workforce import (  # noqa: F401
    Employee,
    Site,
    SupervisorAssignment,
)

__all__ = [
    # Enums
    "AssignmentStatus",
    "CellStatus",
    "LearningFrequency",
    # Workforce
    "Site",
    "Employee",
    "SupervisorAssignment",
    # Learning
    "LearningItem",
    "Assignment",
    "Completion",
]
