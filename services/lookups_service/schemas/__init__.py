"""Lookups Service schemas package.

IMPORTANT: Every schema class must be listed here.
When adding a new schema, add its import and __all__ entry.
"""

from services.lookups_service.schemas.lookup import (  # noqa: F401
    EffectiveLookupValue,
    GlobalValueToggle,
    LookupCategoryResponse,
    TenantLookupValueCreate,
    TenantLookupValueUpdate,
)

__all__ = [
    "EffectiveLookupValue",
    "GlobalValueToggle",
    "LookupCategoryResponse",
    "TenantLookupValueCreate",
    "TenantLookupValueUpdate",
]
