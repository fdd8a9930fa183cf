from typing import Any, AsyncGenerator, AsyncIterator, Optional

from sqlalchemy import Row, Select
from sqlalchemy.ext.asyncio import AsyncSession

from libs.common.config import get_settings
from libs.db.config import AsyncSessionLocal


async def get_async_db() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency that yields an async database session.
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def stream_rows(
    db: AsyncSession, query: Select[Any], batch_size: Optional[int] = None
) -> AsyncIterator[Row[Any]]:
    """Iterate a query's rows, fetching ``batch_size`` rows at a time.

    Report queries over a whole tenant go through here so the full result set
    is never buffered by the driver.
    """
    batch_size = batch_size or get_settings().REPORT_BATCH_SIZE
    result = await db.stream(query.execution_options(yield_per=batch_size))
    async for row in result:
        yield row
