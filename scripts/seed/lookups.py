"""Seed lookup categories and their global default values.

Seeds:
- TrainingCategory (tenants may add custom values)
- Department (tenants may add custom values)
- JobTitle (tenants may add custom values)
- Language (global only; metadata carries the ISO code)

Safe to re-run: existing categories and values are left untouched.
"""

import asyncio

from libs.db.config import AsyncSessionLocal
from services.lookups_service.models import (
    DEPARTMENT,
    JOB_TITLE,
    LANGUAGE,
    TRAINING_CATEGORY,
    LookupCategory,
    LookupValue,
)
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

# name -> (module, allow_custom, [(code, name, metadata), ...])
LOOKUP_DEFAULTS = {
    TRAINING_CATEGORY: (
        "training",
        True,
        [
            ("general-safety", "General Safety", None),
            ("fire-safety", "Fire Safety", None),
            ("manual-handling", "Manual Handling", None),
            ("working-at-height", "Working at Height", None),
            ("ppe", "Personal Protective Equipment", None),
        ],
    ),
    DEPARTMENT: (
        "core",
        True,
        [
            ("operations", "Operations", None),
            ("maintenance", "Maintenance", None),
            ("administration", "Administration", None),
        ],
    ),
    JOB_TITLE: (
        "core",
        True,
        [
            ("operator", "Operator", None),
            ("supervisor", "Supervisor", None),
            ("site-manager", "Site Manager", None),
        ],
    ),
    LANGUAGE: (
        "training",
        False,
        [
            ("english", "English", {"iso": "en"}),
            ("spanish", "Spanish", {"iso": "es"}),
            ("polish", "Polish", {"iso": "pl"}),
            ("portuguese", "Portuguese", {"iso": "pt"}),
        ],
    ),
}


async def seed_lookups(session: AsyncSession) -> int:
    """Insert missing categories and values. Returns the number of rows added."""
    added = 0
    for category_name, (module, allow_custom, values) in LOOKUP_DEFAULTS.items():
        result = await session.execute(
            select(LookupCategory).where(LookupCategory.name == category_name)
        )
        category = result.scalar_one_or_none()
        if category is None:
            category = LookupCategory(
                name=category_name, module=module, allow_custom=allow_custom
            )
            session.add(category)
            await session.flush()
            added += 1
            print(f"  Seeded category {category_name}")

        existing_result = await session.execute(
            select(LookupValue.code).where(LookupValue.category_id == category.id)
        )
        existing_codes = set(existing_result.scalars().all())

        for sort_order, (code, name, metadata) in enumerate(values):
            if code in existing_codes:
                continue
            session.add(
                LookupValue(
                    category_id=category.id,
                    code=code,
                    name=name,
                    metadata_=metadata,
                    sort_order=sort_order,
                )
            )
            added += 1

    await session.commit()
    return added


async def main():
    async with AsyncSessionLocal() as session:
        added = await seed_lookups(session)
    print(f"  Lookup seeding done ({added} rows added)")


if __name__ == "__main__":
    asyncio.run(main())
