"""Merge of global lookup values with one tenant's overrides and custom values.

Pure functions over plain dataclasses; ``services.lookup_ops`` loads the rows
and hands them over. A tenant row is either a ``TenantOverride`` (it points
at a global value) or a ``TenantCustom``; ``classify_tenant_row`` decides
which, once.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, Optional, Union

from services.lookups_service.schemas import EffectiveLookupValue


@dataclass(frozen=True)
class GlobalEntry:
    id: uuid.UUID
    code: str
    name: str
    metadata: Optional[dict[str, Any]]
    sort_order: int


@dataclass(frozen=True)
class TenantOverride:
    id: uuid.UUID
    global_id: uuid.UUID
    code: str
    name: str
    metadata: Optional[dict[str, Any]]
    sort_order: int
    is_enabled: bool
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class TenantCustom:
    id: uuid.UUID
    code: str
    name: str
    metadata: Optional[dict[str, Any]]
    sort_order: int
    is_enabled: bool


TenantEntry = Union[TenantOverride, TenantCustom]


def global_entry(row) -> GlobalEntry:
    return GlobalEntry(
        id=row.id,
        code=row.code,
        name=row.name,
        metadata=row.metadata_,
        sort_order=row.sort_order,
    )


def classify_tenant_row(row) -> TenantEntry:
    """Turn a ``TenantLookupValue`` row into its variant."""
    if row.lookup_value_id is not None:
        return TenantOverride(
            id=row.id,
            global_id=row.lookup_value_id,
            code=row.code,
            name=row.name,
            metadata=row.metadata_,
            sort_order=row.sort_order,
            is_enabled=row.is_enabled,
            created_at=row.created_at,
        )
    return TenantCustom(
        id=row.id,
        code=row.code,
        name=row.name,
        metadata=row.metadata_,
        sort_order=row.sort_order,
        is_enabled=row.is_enabled,
    )


def _overrides_by_global(entries: Iterable[TenantEntry]) -> dict[uuid.UUID, TenantOverride]:
    # Earliest override wins if the unique index was ever bypassed
    chosen: dict[uuid.UUID, TenantOverride] = {}
    overrides = [e for e in entries if isinstance(e, TenantOverride)]
    overrides.sort(key=lambda o: (o.created_at is None, o.created_at or datetime.min))
    for override in overrides:
        chosen.setdefault(override.global_id, override)
    return chosen


def merge_effective_values(
    category_id: uuid.UUID,
    allow_custom: bool,
    globals_: Iterable[GlobalEntry],
    tenant_entries: Iterable[TenantEntry],
    include_disabled: bool = False,
) -> list[EffectiveLookupValue]:
    """Effective values for one tenant and category.

    - a global with an override shows the override's fields when the override
      is enabled (or ``include_disabled``); a disabled override suppresses the
      global entirely
    - a global without an override shows as-is
    - custom values show only when the category allows them, and only enabled
    - ordered by name, then sort order
    """
    tenant_entries = list(tenant_entries)
    overrides = _overrides_by_global(tenant_entries)
    values: list[EffectiveLookupValue] = []

    for entry in globals_:
        override = overrides.get(entry.id)
        if override is None:
            values.append(
                EffectiveLookupValue(
                    id=entry.id,
                    category_id=category_id,
                    code=entry.code,
                    name=entry.name,
                    metadata=entry.metadata,
                    sort_order=entry.sort_order,
                    is_enabled=True,
                    is_global=True,
                )
            )
        elif override.is_enabled or include_disabled:
            values.append(
                EffectiveLookupValue(
                    id=override.id,
                    category_id=category_id,
                    code=override.code,
                    name=override.name,
                    metadata=override.metadata,
                    sort_order=override.sort_order,
                    is_enabled=override.is_enabled,
                    is_global=False,
                    overridden_global_id=entry.id,
                )
            )

    if allow_custom:
        for entry in tenant_entries:
            if isinstance(entry, TenantCustom) and entry.is_enabled:
                values.append(
                    EffectiveLookupValue(
                        id=entry.id,
                        category_id=category_id,
                        code=entry.code,
                        name=entry.name,
                        metadata=entry.metadata,
                        sort_order=entry.sort_order,
                        is_enabled=True,
                        is_global=False,
                    )
                )

    values.sort(key=lambda v: (v.name, v.sort_order))
    return values


def display_names(values: Iterable[EffectiveLookupValue]) -> dict[str, str]:
    """Map code -> display name."""
    return {value.code: value.name for value in values}
