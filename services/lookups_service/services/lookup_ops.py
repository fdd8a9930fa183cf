"""Lookup reads and tenant-side mutations."""

import uuid
from typing import Optional

from libs.common.logging import get_logger
from libs.common.results import ServiceResult, service_operation
from services.lookups_service.models import (
    LookupCategory,
    LookupValue,
    TenantLookupValue,
)
from services.lookups_service.resolution import (
    classify_tenant_row,
    global_entry,
    merge_effective_values,
)
from services.lookups_service.schemas import (
    EffectiveLookupValue,
    LookupCategoryResponse,
    TenantLookupValueCreate,
    TenantLookupValueUpdate,
)
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

logger = get_logger(__name__)


async def _active_category(
    db: AsyncSession, category_name: str
) -> Optional[LookupCategory]:
    result = await db.execute(
        select(LookupCategory).where(
            LookupCategory.name == category_name,
            LookupCategory.is_active.is_(True),
        )
    )
    return result.scalar_one_or_none()


async def _code_holder(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    category_id: uuid.UUID,
    code: str,
) -> Optional[TenantLookupValue]:
    """The tenant row holding ``code`` in the category, soft-deleted rows included.

    The unique index does not know about soft deletes, so neither does this.
    """
    result = await db.execute(
        select(TenantLookupValue)
        .where(
            TenantLookupValue.tenant_id == tenant_id,
            TenantLookupValue.category_id == category_id,
            TenantLookupValue.code == code,
        )
        .limit(1)
    )
    return result.scalar_one_or_none()


def _tenant_value_response(row: TenantLookupValue) -> EffectiveLookupValue:
    return EffectiveLookupValue(
        id=row.id,
        category_id=row.category_id,
        code=row.code,
        name=row.name,
        metadata=row.metadata_,
        sort_order=row.sort_order,
        is_enabled=row.is_enabled,
        is_global=False,
        overridden_global_id=row.lookup_value_id,
    )


# ---------------------------------------------------------------------------
# Reads
# ---------------------------------------------------------------------------


@service_operation("retrieving lookup values")
async def get_effective_values(
    db: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    category_name: str,
    include_disabled: bool = False,
) -> ServiceResult[list[EffectiveLookupValue]]:
    """Values of ``category_name`` as ``tenant_id`` sees them."""
    category = await _active_category(db, category_name)
    if category is None:
        return ServiceResult.not_found(f"Lookup category '{category_name}' not found")

    globals_result = await db.execute(
        select(LookupValue).where(
            LookupValue.category_id == category.id,
            LookupValue.is_active.is_(True),
        )
    )
    tenant_result = await db.execute(
        select(TenantLookupValue).where(
            TenantLookupValue.tenant_id == tenant_id,
            TenantLookupValue.category_id == category.id,
            TenantLookupValue.is_deleted.is_(False),
        )
    )

    values = merge_effective_values(
        category.id,
        category.allow_custom,
        [global_entry(row) for row in globals_result.scalars().all()],
        [classify_tenant_row(row) for row in tenant_result.scalars().all()],
        include_disabled=include_disabled,
    )
    return ServiceResult.success(values)


@service_operation("retrieving lookup categories")
async def list_categories(db: AsyncSession) -> ServiceResult[list[LookupCategoryResponse]]:
    result = await db.execute(
        select(LookupCategory)
        .where(LookupCategory.is_active.is_(True))
        .order_by(LookupCategory.name)
    )
    return ServiceResult.success(
        [LookupCategoryResponse.model_validate(c) for c in result.scalars().all()]
    )


# ---------------------------------------------------------------------------
# Tenant custom values
# ---------------------------------------------------------------------------


@service_operation("creating lookup value")
async def create_custom_value(
    db: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    category_name: str,
    payload: TenantLookupValueCreate,
) -> ServiceResult[EffectiveLookupValue]:
    category = await _active_category(db, category_name)
    if category is None:
        return ServiceResult.not_found(f"Lookup category '{category_name}' not found")
    if not category.allow_custom:
        return ServiceResult.invalid(
            f"Category '{category_name}' does not allow custom values"
        )

    existing = await _code_holder(db, tenant_id, category.id, payload.code)
    if existing is not None:
        if not (existing.is_deleted and existing.lookup_value_id is None):
            return ServiceResult.invalid(
                f"A value with code '{payload.code}' already exists in this category"
            )
        # Bring the soft-deleted custom value back instead of colliding
        existing.name = payload.name
        existing.metadata_ = payload.metadata
        existing.sort_order = payload.sort_order
        existing.is_enabled = True
        existing.is_deleted = False
        value = existing
    else:
        value = TenantLookupValue(
            tenant_id=tenant_id,
            category_id=category.id,
            code=payload.code,
            name=payload.name,
            metadata_=payload.metadata,
            sort_order=payload.sort_order,
            is_enabled=True,
        )
        db.add(value)

    await db.commit()
    await db.refresh(value)
    logger.info(
        "Created lookup value %s in %s for tenant %s",
        value.code,
        category_name,
        tenant_id,
        extra={"tenant_id": str(tenant_id)},
    )
    return ServiceResult.success(_tenant_value_response(value))


@service_operation("updating lookup value")
async def update_tenant_value(
    db: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    value_id: uuid.UUID,
    payload: TenantLookupValueUpdate,
) -> ServiceResult[EffectiveLookupValue]:
    result = await db.execute(
        select(TenantLookupValue).where(
            TenantLookupValue.id == value_id,
            TenantLookupValue.tenant_id == tenant_id,
            TenantLookupValue.is_deleted.is_(False),
        )
    )
    value = result.scalar_one_or_none()
    if value is None:
        return ServiceResult.not_found(f"Tenant lookup value with ID {value_id} not found")

    holder = await _code_holder(db, tenant_id, value.category_id, payload.code)
    if holder is not None and holder.id != value.id:
        return ServiceResult.invalid(
            f"A value with code '{payload.code}' already exists in this category"
        )

    value.code = payload.code
    value.name = payload.name
    value.metadata_ = payload.metadata
    value.sort_order = payload.sort_order
    value.is_enabled = payload.is_enabled

    await db.commit()
    await db.refresh(value)
    return ServiceResult.success(_tenant_value_response(value))


@service_operation("deleting lookup value")
async def delete_tenant_value(
    db: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    value_id: uuid.UUID,
) -> ServiceResult[None]:
    """Soft-delete a custom value. Overrides are disabled, never deleted."""
    result = await db.execute(
        select(TenantLookupValue).where(
            TenantLookupValue.id == value_id,
            TenantLookupValue.tenant_id == tenant_id,
            TenantLookupValue.is_deleted.is_(False),
        )
    )
    value = result.scalar_one_or_none()
    if value is None:
        return ServiceResult.not_found(f"Tenant lookup value with ID {value_id} not found")
    if value.is_override:
        return ServiceResult.invalid(
            "Cannot delete an override of a global value. Disable it instead."
        )

    value.is_deleted = True
    await db.commit()
    logger.info(
        "Deleted lookup value %s for tenant %s",
        value_id,
        tenant_id,
        extra={"tenant_id": str(tenant_id)},
    )
    return ServiceResult.success()


# ---------------------------------------------------------------------------
# Global value overrides
# ---------------------------------------------------------------------------


@service_operation("toggling lookup value")
async def toggle_global_override(
    db: AsyncSession,
    *,
    tenant_id: uuid.UUID,
    category_name: str,
    lookup_value_id: uuid.UUID,
    is_enabled: bool,
) -> ServiceResult[EffectiveLookupValue]:
    """Enable or disable a global value for one tenant.

    Reuses the tenant's override when there is one, otherwise creates it from
    the global's fields. Two concurrent first toggles race on the unique
    index; the loser rolls back and runs the find-or-create again, once.
    """
    try:
        return await _toggle_once(db, tenant_id, category_name, lookup_value_id, is_enabled)
    except IntegrityError:
        await db.rollback()
        logger.warning(
            "Concurrent override insert for value %s, tenant %s; retrying",
            lookup_value_id,
            tenant_id,
            extra={"tenant_id": str(tenant_id)},
        )
    return await _toggle_once(db, tenant_id, category_name, lookup_value_id, is_enabled)


async def _toggle_once(
    db: AsyncSession,
    tenant_id: uuid.UUID,
    category_name: str,
    lookup_value_id: uuid.UUID,
    is_enabled: bool,
) -> ServiceResult[EffectiveLookupValue]:
    category = await _active_category(db, category_name)
    if category is None:
        return ServiceResult.not_found(f"Lookup category '{category_name}' not found")

    global_result = await db.execute(
        select(LookupValue).where(
            LookupValue.id == lookup_value_id,
            LookupValue.category_id == category.id,
            LookupValue.is_active.is_(True),
        )
    )
    global_value = global_result.scalar_one_or_none()
    if global_value is None:
        return ServiceResult.not_found(
            f"Global lookup value with ID {lookup_value_id} not found in category '{category_name}'"
        )

    override_result = await db.execute(
        select(TenantLookupValue)
        .where(
            TenantLookupValue.tenant_id == tenant_id,
            TenantLookupValue.category_id == category.id,
            TenantLookupValue.lookup_value_id == lookup_value_id,
        )
        .order_by(TenantLookupValue.created_at)
        .limit(1)
    )
    override = override_result.scalar_one_or_none()

    if override is None:
        holder = await _code_holder(db, tenant_id, category.id, global_value.code)
        if holder is not None and not holder.is_deleted:
            return ServiceResult.invalid(
                f"Code '{global_value.code}' is already used by another value in this category"
            )
        override = holder

    if override is None:
        override = TenantLookupValue(
            tenant_id=tenant_id,
            category_id=category.id,
            lookup_value_id=global_value.id,
            code=global_value.code,
            name=global_value.name,
            metadata_=global_value.metadata_,
            sort_order=global_value.sort_order,
            is_enabled=is_enabled,
        )
        db.add(override)
    elif override.lookup_value_id is None:
        # A deleted custom value still owns the code; it becomes the override
        override.lookup_value_id = global_value.id
        override.name = global_value.name
        override.metadata_ = global_value.metadata_
        override.sort_order = global_value.sort_order
        override.is_enabled = is_enabled
        override.is_deleted = False
    else:
        override.is_enabled = is_enabled

    await db.commit()
    await db.refresh(override)
    logger.info(
        "Set global value %s to %s for tenant %s",
        global_value.code,
        "enabled" if is_enabled else "disabled",
        tenant_id,
        extra={"tenant_id": str(tenant_id)},
    )
    return ServiceResult.success(_tenant_value_response(override))
