"""Enum definitions for training service models."""

import enum


def enum_values(enum_cls):
    """Return persistent DB values for SAEnum mappings."""
    return [member.value for member in enum_cls]


class AssignmentStatus(str, enum.Enum):
    """Persisted lifecycle of an assignment.

    Written by the scheduler; reports treat it as a hint and re-derive
    "overdue" from the due date at read time.
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    OVERDUE = "overdue"
    CANCELLED = "cancelled"


class CellStatus(str, enum.Enum):
    """Derived status of one employee x learning item pair."""

    COMPLETED = "completed"
    IN_PROGRESS = "in_progress"
    OVERDUE = "overdue"
    ASSIGNED = "assigned"
    NOT_ASSIGNED = "not_assigned"


class LearningFrequency(str, enum.Enum):
    ONCE = "once"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    ANNUALLY = "annually"
