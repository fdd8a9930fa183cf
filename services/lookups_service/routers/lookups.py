import uuid

from fastapi import APIRouter, Depends, Query, status
from libs.auth.dependencies import get_tenant_context, require_admin
from libs.auth.models import TenantContext
from libs.common.results import raise_for_failure
from libs.db.session import get_async_db
from services.lookups_service.schemas import (
    EffectiveLookupValue,
    GlobalValueToggle,
    LookupCategoryResponse,
    TenantLookupValueCreate,
    TenantLookupValueUpdate,
)
from services.lookups_service.services import lookup_ops
from sqlalchemy.ext.asyncio import AsyncSession

router = APIRouter(prefix="/lookups", tags=["lookups"])


@router.get("/categories", response_model=list[LookupCategoryResponse])
async def list_categories(
    _: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_async_db),
):
    """List active lookup categories."""
    return raise_for_failure(await lookup_ops.list_categories(db))


@router.get("/{category_name}", response_model=list[EffectiveLookupValue])
async def get_effective_values(
    category_name: str,
    include_disabled: bool = Query(False),
    context: TenantContext = Depends(get_tenant_context),
    db: AsyncSession = Depends(get_async_db),
):
    """Values of a category as the caller's tenant sees them."""
    result = await lookup_ops.get_effective_values(
        db,
        tenant_id=context.tenant_id,
        category_name=category_name,
        include_disabled=include_disabled,
    )
    return raise_for_failure(result)


@router.post(
    "/{category_name}/values",
    response_model=EffectiveLookupValue,
    status_code=status.HTTP_201_CREATED,
)
async def create_custom_value(
    category_name: str,
    payload: TenantLookupValueCreate,
    context: TenantContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await lookup_ops.create_custom_value(
        db,
        tenant_id=context.tenant_id,
        category_name=category_name,
        payload=payload,
    )
    return raise_for_failure(result)


@router.put("/values/{value_id}", response_model=EffectiveLookupValue)
async def update_tenant_value(
    value_id: uuid.UUID,
    payload: TenantLookupValueUpdate,
    context: TenantContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    result = await lookup_ops.update_tenant_value(
        db, tenant_id=context.tenant_id, value_id=value_id, payload=payload
    )
    return raise_for_failure(result)


@router.delete("/values/{value_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tenant_value(
    value_id: uuid.UUID,
    context: TenantContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Soft-delete a tenant custom value."""
    result = await lookup_ops.delete_tenant_value(
        db, tenant_id=context.tenant_id, value_id=value_id
    )
    raise_for_failure(result)
    return None


@router.put(
    "/{category_name}/global/{lookup_value_id}/toggle",
    response_model=EffectiveLookupValue,
)
async def toggle_global_value(
    category_name: str,
    lookup_value_id: uuid.UUID,
    payload: GlobalValueToggle,
    context: TenantContext = Depends(require_admin),
    db: AsyncSession = Depends(get_async_db),
):
    """Enable or disable a global value for the caller's tenant."""
    result = await lookup_ops.toggle_global_override(
        db,
        tenant_id=context.tenant_id,
        category_name=category_name,
        lookup_value_id=lookup_value_id,
        is_enabled=payload.is_enabled,
    )
    return raise_for_failure(result)
