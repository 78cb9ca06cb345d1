"""Dev seeding helper for stub authentication."""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from backend.app.api.auth import DEV_USER_ID
from backend.app.config import get_settings
from backend.app.db.engine import get_async_engine
from backend.app.db.models import User


async def seed_dev_user() -> None:
    """Seed the dev user for stub authentication.

    This function is idempotent - safe to run multiple times.
    Creates the user with id DEV_USER_ID if it doesn't exist, with the
    configured default monthly request limit.
    """
    async with AsyncSession(get_async_engine()) as session:
        result = await session.execute(select(User).where(User.id == DEV_USER_ID))
        user = result.scalar_one_or_none()

        if not user:
            print(f"Creating dev user with id {DEV_USER_ID}...")
            user = User(
                id=DEV_USER_ID,
                email="dev@example.com",
                password_hash="stub",  # Not used in stub auth
                monthly_request_limit=get_settings().default_monthly_request_limit,
            )
            session.add(user)
        else:
            print(f"Dev user already exists: {user.email}")

        await session.commit()
        print("Dev seeding complete")


if __name__ == "__main__":
    asyncio.run(seed_dev_user())
