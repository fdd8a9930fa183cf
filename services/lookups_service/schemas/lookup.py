"""
Pydantic schemas for lookup categories and tenant lookup values.
"""

from typing import Any, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# READ SCHEMAS
# ============================================================================


class LookupCategoryResponse(BaseModel):
    id: UUID
    name: str
    module: str
    allow_custom: bool
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class EffectiveLookupValue(BaseModel):
    """A value as one tenant sees it after merging globals with its own rows."""

    id: UUID
    category_id: UUID
    code: str
    name: str
    metadata: Optional[dict[str, Any]] = None
    sort_order: int = 0
    is_enabled: bool = True
    is_global: bool
    # Set when this row is a tenant override of a global value
    overridden_global_id: Optional[UUID] = None


# ============================================================================
# WRITE SCHEMAS
# ============================================================================


class TenantLookupValueCreate(BaseModel):
    """Create a tenant custom value."""

    code: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    metadata: Optional[dict[str, Any]] = None
    sort_order: int = 0


class TenantLookupValueUpdate(BaseModel):
    """Replace the editable fields of a tenant value (custom or override)."""

    code: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=200)
    metadata: Optional[dict[str, Any]] = None
    sort_order: int = 0
    is_enabled: bool = True


class GlobalValueToggle(BaseModel):
    is_enabled: bool
