"""Integration tests for dev seeding helper."""

from unittest.mock import patch

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from backend.app.api.auth import DEV_USER_ID
from backend.app.db.models import User
from backend.app.db.seed_dev import seed_dev_user


@pytest.mark.asyncio
async def test_seed_creates_dev_user_once(sqlite_engine: AsyncEngine) -> None:
    """Test seeding is idempotent and uses the default monthly limit."""
    with patch("backend.app.db.seed_dev.get_async_engine", return_value=sqlite_engine):
        await seed_dev_user()
        await seed_dev_user()

    async with AsyncSession(sqlite_engine) as session:
        count = await session.scalar(select(func.count(User.id)))
        user = await session.get(User, DEV_USER_ID)

    assert count == 1
    assert user is not None
    assert user.email == "dev@example.com"
    assert user.monthly_request_limit == 5
