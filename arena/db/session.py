from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine

from arena.core.config import get_settings


def build_engine(database_url: str) -> AsyncEngine:
    return create_async_engine(database_url, pool_pre_ping=True)


engine = build_engine(get_settings().database_url)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False)
