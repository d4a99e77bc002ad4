"""Database fixtures for berrycrud tests (shared)."""

import pytest
from datetime import datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Post, PostStatus, Role, User


async def create_sample_users(session: AsyncSession):
    """Create and commit the sample users used across tests."""
    users = [
        User(name="Alice Johnson", email="alice@example.com", age=34, role=Role.ADMIN),
        User(name="Bob Smith", email="bob@example.com", age=27, role=Role.MEMBER),
        User(name="Charlie Brown", email="charlie@example.com", age=41, role=Role.MEMBER),
        User(name="Dave Guest", email="dave@example.com", age=None, role=Role.GUEST, is_active=False),
    ]
    session.add_all(users)
    await session.flush()
    await session.commit()
    return users


@pytest.fixture(scope="function")
async def sample_users(db_session: AsyncSession):
    return await create_sample_users(db_session)


async def create_sample_posts(session: AsyncSession, users):
    """Create and commit the sample posts with deterministic timestamps."""
    alice, bob, charlie, _ = users
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    posts = [
        Post(title="First Post", content="Hello world!", author_id=alice.id,
             status=PostStatus.PUBLISHED, published_at=now - timedelta(minutes=60)),
        Post(title="GraphQL is Great", content="I love GraphQL!", author_id=alice.id,
             status=PostStatus.PUBLISHED, published_at=now - timedelta(minutes=45)),
        Post(title="SQLAlchemy Tips", content="Some useful tips...", author_id=bob.id,
             status=PostStatus.DRAFT),
        Post(title="Getting Started", content="A beginner's guide", author_id=charlie.id,
             status=PostStatus.ARCHIVED),
    ]
    session.add_all(posts)
    await session.flush()
    await session.commit()
    return posts


@pytest.fixture(scope="function")
async def sample_posts(db_session: AsyncSession, sample_users):
    return await create_sample_posts(db_session, sample_users)


@pytest.fixture(scope="function")
async def populated_db(db_session: AsyncSession):
    users = await create_sample_users(db_session)
    posts = await create_sample_posts(db_session, users)
    return {'users': users, 'posts': posts}
