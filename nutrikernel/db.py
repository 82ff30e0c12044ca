"""Async engine + session dependency for the goal history store."""

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from nutrikernel.config import settings

_ASYNC_SCHEMES = (
    ("postgres://", "postgresql+asyncpg://"),
    ("postgresql://", "postgresql+asyncpg://"),
)


def async_database_url(url: str) -> str:
    """Rewrite plain Postgres URLs (Heroku/Supabase style) to the asyncpg driver."""
    for prefix, replacement in _ASYNC_SCHEMES:
        if url.startswith(prefix):
            return url.replace(prefix, replacement, 1)
    return url


engine = create_async_engine(async_database_url(settings.database_url), pool_pre_ping=True)
async_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_session() -> AsyncSession:  # type: ignore[misc]
    async with async_session() as session:
        yield session
