import logging
import secrets
import string

from passlib.context import CryptContext
from sqlalchemy.orm import selectinload

from app.db.models import User
from app.db.store import Store
from app.schemas.user import FriendList, UserProfile, UserSummary
from app.services.errors import EmailInUse, StoreConflict, UserNotFound, UsernameInUse

log = logging.getLogger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

PUBLIC_ID_ALPHABET = string.ascii_letters + string.digits


def generate_public_id() -> str:
    """Nine random alphanumerics grouped as XXX-XXX-XXX."""
    chars = [secrets.choice(PUBLIC_ID_ALPHABET) for _ in range(9)]
    return "-".join("".join(chars[i:i + 3]) for i in range(0, 9, 3))


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


class UserService:

    def __init__(self, store: Store, search_limit: int = 20):
        self.store = store
        self.search_limit = search_limit

    async def _ensure_available(self, email: str, username: str) -> None:
        if await self.store.find(User, email=email):
            raise EmailInUse(email=email)
        if await self.store.find(User, username=username):
            raise UsernameInUse(username=username)

    async def _unused_public_id(self) -> str:
        public_id = generate_public_id()
        while await self.store.find(User, public_id=public_id):
            public_id = generate_public_id()
        return public_id

    async def register_user(
        self,
        email: str,
        password: str,
        username: str,
        *,
        profile_picture: str | None = None,
        bio: str | None = None,
        website: str | None = None,
    ) -> UserProfile:
        try:
            async with self.store.transaction():
                await self._ensure_available(email, username)
                user = await self.store.create(
                    User,
                    email=email,
                    username=username,
                    password_hash=pwd_context.hash(password),
                    public_id=await self._unused_public_id(),
                    profile_picture=profile_picture,
                    bio=bio,
                    website=website,
                )
        except StoreConflict:
            # Someone registered the same email or username in between.
            await self._ensure_available(email, username)
            raise

        log.info("Registered user %s (%s)", user.id, user.public_id)
        return UserProfile.model_validate(user)

    async def authenticate(self, email: str, password: str) -> UserProfile | None:
        user = await self.store.find(User, email=email)
        if not user or not verify_password(password, user.password_hash):
            return None
        return UserProfile.model_validate(user)

    async def get_profile(self, user_id: int) -> UserProfile:
        user = await self.store.get(User, user_id)
        if user is None:
            raise UserNotFound(user_id=user_id)
        return UserProfile.model_validate(user)

    async def update_profile_picture(self, user_id: int, profile_picture: str | None) -> UserProfile:
        async with self.store.transaction():
            user = await self.store.find(User, id=user_id, for_update=True)
            if user is None:
                raise UserNotFound(user_id=user_id)
            user = await self.store.update(user, profile_picture=profile_picture)

        log.info("Updated profile picture for user %s", user_id)
        return UserProfile.model_validate(user)

    async def get_friends(self, user_id: int) -> FriendList:
        user = await self.store.find(
            User,
            id=user_id,
            options=[selectinload(User.friends), selectinload(User.friend_of)],
        )
        if user is None:
            raise UserNotFound(user_id=user_id)
        return FriendList(
            user=UserSummary.model_validate(user),
            friends=[UserSummary.model_validate(f) for f in user.all_friends],
        )

    async def search_users(self, term: str, limit: int | None = None) -> list[UserSummary]:
        term = term.strip()
        if not term:
            return []
        users = await self.store.find_many(
            User,
            User.username.icontains(term, autoescape=True),
            order_by=[User.username],
            limit=limit or self.search_limit,
        )
        return [UserSummary.model_validate(u) for u in users]
