import argparse
import asyncio

from app.core.config import get_settings
from app.main import SocialApp, configure_logging
from app.schemas.friend import FriendCapabilities
from app.services.errors import EmailInUse, SocialError, UsernameInUse


async def seed(count: int, password: str, create_tables: bool) -> None:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    app = SocialApp(settings)
    try:
        if create_tables:
            await app.init_models()

        async with app.services() as svc:
            users = []
            for n in range(1, count + 1):
                email = f"user{n}@example.com"
                try:
                    user = await svc.users.register_user(
                        email,
                        f"{password}{n}",
                        f"user{n}",
                        bio=f"This is user number {n}. A bio for testing.",
                        website=f"https://user{n}.com",
                        profile_picture=f"https://via.placeholder.com/150?text=User+{n}",
                    )
                    print(f"Inserted user {email} ({user.public_id})")
                except (EmailInUse, UsernameInUse):
                    print(f"Skipped existing user {email}")
                    continue
                users.append(user)

            if len(users) < 3:
                print("Not enough new users to build a demo graph.")
                return

            first, second, third = users[:3]
            try:
                edge = await svc.follows.send_follow_request(second.id, first.id)
                await svc.follows.accept_follow_request(edge.id, first.id)
                await svc.follows.send_follow_request(third.id, first.id)

                request = await svc.friends.send_friend_request(first.id, second.id)
                await svc.relationships.confirm_friend_request(
                    request.id,
                    second.id,
                    FriendCapabilities(chat_enabled=True, feed_enabled=True),
                )
                await svc.friends.send_friend_request(third.id, second.id)
            except SocialError as exc:
                print(f"Demo graph incomplete: {exc.message}")
                return
            print(f"Seeded demo graph for {first.username}, {second.username}, {third.username}")
    finally:
        await app.close()
    print("Done.")


def main():
    ap = argparse.ArgumentParser(description="Seed demo users and a small social graph.")
    ap.add_argument("--users", "-n", type=int, default=5, help="Number of users to register")
    ap.add_argument("--password", default="password", help="Password prefix; user N gets <prefix>N")
    ap.add_argument("--create-tables", action="store_true",
                    help="Create missing tables first (development databases only)")
    args = ap.parse_args()
    asyncio.run(seed(args.users, args.password, args.create_tables))


if __name__ == "__main__":
    main()

    # to run:
    # python -m app.scripts.seed_social --create-tables
