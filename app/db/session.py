from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from app.core.config import Settings


def make_engine(url: str, *, echo: bool = False, isolation_level: str | None = None, **kwargs) -> AsyncEngine:
    if isolation_level:
        kwargs["isolation_level"] = isolation_level
    return create_async_engine(url.replace("psycopg2", "asyncpg"), echo=echo, **kwargs)


def engine_from_settings(settings: Settings) -> AsyncEngine:
    return make_engine(
        settings.DB_URL,
        echo=settings.DB_ECHO,
        isolation_level=settings.DB_ISOLATION_LEVEL,
    )


def make_sessionmaker(engine: AsyncEngine) -> sessionmaker:
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
