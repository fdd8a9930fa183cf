from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from libs.common.config import Settings, get_settings

settings = get_settings()


def build_engine(config: Settings) -> AsyncEngine:
    """Create the async engine for the configured database.

    SQLite (tests, local tooling) shares a single connection so an in-memory
    database survives across sessions; server databases get a sized pool.
    """
    if config.is_sqlite:
        return create_async_engine(
            config.DATABASE_URL,
            echo=config.DB_ECHO,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    return create_async_engine(
        config.DATABASE_URL,
        echo=config.DB_ECHO,
        future=True,
        pool_pre_ping=True,  # Test connections before using
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        pool_timeout=config.DB_POOL_TIMEOUT,
        pool_recycle=config.DB_POOL_RECYCLE,
    )


engine = build_engine(settings)

# Create async session factory
AsyncSessionLocal = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)
