from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base
from sqlalchemy.pool import NullPool

from sustainable_cities.core.config import settings

_engine_kwargs = {"pool_pre_ping": True}
if settings.async_database_url.startswith("sqlite"):
    # aiosqlite connections are cheap; pooling them across event loops is not
    _engine_kwargs = {"poolclass": NullPool}

engine = create_async_engine(settings.async_database_url, **_engine_kwargs)

SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autoflush=False,
    expire_on_commit=False,
)

Base = declarative_base()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with SessionLocal() as session:
        yield session


async def init_models() -> None:
    """Create all tables registered on Base.metadata."""
    from sustainable_cities import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_models() -> None:
    from sustainable_cities import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
