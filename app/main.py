import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass

from app.core.config import Settings, get_settings
from app.db.models import Base
from app.db.session import engine_from_settings, make_sessionmaker
from app.db.store import Store
from app.services.follow import FollowService
from app.services.friend import FriendRequestService
from app.services.relationship import RelationshipService
from app.services.user import UserService

log = logging.getLogger("social")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@dataclass
class SocialServices:
    store: Store
    users: UserService
    follows: FollowService
    friends: FriendRequestService
    relationships: RelationshipService


def build_services(store: Store, settings: Settings | None = None) -> SocialServices:
    search_limit = settings.SEARCH_LIMIT if settings else 20
    follows = FollowService(store)
    return SocialServices(
        store=store,
        users=UserService(store, search_limit=search_limit),
        follows=follows,
        friends=FriendRequestService(store),
        relationships=RelationshipService(store, follows=follows),
    )


class SocialApp:
    """Owns settings, the engine and the sessionmaker for one process."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.engine = engine_from_settings(self.settings)
        self.SessionLocal = make_sessionmaker(self.engine)

    async def init_models(self) -> None:
        """Create missing tables. Production databases are migrated with Alembic."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        log.info("Database tables ensured")

    @asynccontextmanager
    async def services(self):
        async with self.SessionLocal() as session:
            yield build_services(Store(session), self.settings)

    async def close(self) -> None:
        await self.engine.dispose()
