"""Lookups Service models package.

IMPORTANT: Every model class must be listed here.
When adding a new model, add both its import and its __all__ entry.
"""

from services.lookups_service.models.lookup import (  # noqa: F401
    DEPARTMENT,
    JOB_TITLE,
    LANGUAGE,
    TRAINING_CATEGORY,
    LookupCategory,
    LookupValue,
    TenantLookupValue,
)

__all__ = [
    # Category names
    "DEPARTMENT",
    "JOB_TITLE",
    "LANGUAGE",
    "TRAINING_CATEGORY",
    # Models
    "LookupCategory",
    "LookupValue",
    "TenantLookupValue",
]
