import itertools

import pytest
import pytest_asyncio
from sqlalchemy.pool import StaticPool

from app.db.models import Base, User
from app.db.session import make_engine, make_sessionmaker
from app.db.store import Store
from app.main import build_services
from app.schemas.user import UserProfile


@pytest_asyncio.fixture
async def engine():
    engine = make_engine("sqlite+aiosqlite://", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session(engine):
    async with make_sessionmaker(engine)() as session:
        yield session


@pytest.fixture
def store(session):
    return Store(session)


@pytest.fixture
def services(store):
    return build_services(store)


@pytest.fixture
def make_user(store):
    counter = itertools.count(1)

    async def _make(username: str | None = None, **fields) -> UserProfile:
        n = next(counter)
        async with store.transaction():
            user = await store.create(
                User,
                username=username or f"user{n}",
                email=fields.pop("email", f"{username or 'user'}{n}@example.com"),
                password_hash="not-a-real-hash",
                public_id=f"AAA-BBB-{n:03d}",
                **fields,
            )
        return UserProfile.model_validate(user)

    return _make
