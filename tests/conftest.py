"""Shared test fixtures and configuration."""

import pytest
from typing import Generator, AsyncGenerator
import os

# Set TESTING flag to prevent loading .env file
os.environ['TESTING'] = '1'

# Set up test environment BEFORE any imports
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite://'
os.environ['SECRET_KEY'] = 'test_secret_key_at_least_32_characters_long_for_security'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['DEBUG'] = 'true'

from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from petpal.config import Settings
from petpal.database import Base, enable_sqlite_foreign_keys
from petpal.models import Animal, Category, User
from petpal.services.user_manager import build_password_helper


TEST_PASSWORD = "Secret1!"


@pytest.fixture(autouse=True)
def setup_test_env() -> Generator[None, None, None]:
    """Set up test environment variables before each test."""
    original_env = os.environ.copy()

    os.environ['TESTING'] = '1'
    os.environ['DATABASE_URL'] = 'sqlite+aiosqlite://'
    os.environ['SECRET_KEY'] = 'test_secret_key_at_least_32_characters_long_for_security'
    os.environ['BCRYPT_ROUNDS'] = '4'

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Provide a clean environment for tests that need to test missing variables."""
    original_env = os.environ.copy()

    # Clear all environment variables except TESTING
    os.environ.clear()
    os.environ['TESTING'] = '1'

    yield

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
async def async_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide async database session for tests."""
    # In-memory SQLite unless a test database is configured
    test_database_url = os.environ.get('TEST_DATABASE_URL', 'sqlite+aiosqlite://')

    if test_database_url.startswith('sqlite'):
        engine = create_async_engine(
            test_database_url,
            echo=False,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        enable_sqlite_foreign_keys(engine)
    else:
        engine = create_async_engine(test_database_url, echo=False, pool_pre_ping=True)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session
        await session.rollback()

    # Drop tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def password_helper():
    """Password helper using the fast test work factor."""
    return build_password_helper(Settings().bcrypt_rounds)


async def make_user(session: AsyncSession, password_helper, username: str, email: str) -> User:
    """Insert a user whose password is TEST_PASSWORD."""
    user = User(
        username=username,
        email=email,
        hashed_password=password_helper.hash(TEST_PASSWORD),
        is_active=True,
        is_superuser=False,
        is_verified=False
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
async def test_user(async_session: AsyncSession, password_helper) -> User:
    """Create a test user."""
    return await make_user(async_session, password_helper, "alice", "alice@example.com")


@pytest.fixture
async def other_user(async_session: AsyncSession, password_helper) -> User:
    """Create a second user."""
    return await make_user(async_session, password_helper, "bob", "bob@example.com")


@pytest.fixture
async def categories(async_session: AsyncSession) -> dict:
    """Create a few categories, keyed by name."""
    created = {name: Category(name=name) for name in ("Dogs", "Cats", "Birds")}
    async_session.add_all(created.values())
    await async_session.commit()
    return created


@pytest.fixture
def make_animal(async_session: AsyncSession):
    """Factory inserting an animal directly, bypassing the service."""

    async def _make_animal(owner: User, category: Category, name: str = "Rex", **kwargs) -> Animal:
        animal = Animal(owner=owner, category=category, name=name, **kwargs)
        async_session.add(animal)
        await async_session.commit()
        return animal

    return _make_animal


@pytest.fixture
async def async_client(async_session: AsyncSession, test_user: User):
    """Create test client with database session and auth overrides."""
    from httpx import AsyncClient, ASGITransport
    from petpal.main import app
    from petpal.database import get_async_session
    from petpal.dependencies import current_active_user

    async def override_get_async_session():
        yield async_session

    async def override_current_active_user():
        return test_user

    app.dependency_overrides[get_async_session] = override_get_async_session
    app.dependency_overrides[current_active_user] = override_current_active_user

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def unauthenticated_client(async_session: AsyncSession):
    """Create test client with database session override but NO auth override.

    Use this for tests that need to test the full authentication flow
    (registration, login, etc.) without pre-authenticated users.
    """
    from httpx import AsyncClient, ASGITransport
    from petpal.main import app
    from petpal.database import get_async_session

    async def override_get_async_session():
        yield async_session

    app.dependency_overrides[get_async_session] = override_get_async_session

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


class DummySMTP:
    """Stands in for smtplib.SMTP_SSL and records what would be sent."""

    def __init__(self, host, port, outbox):
        self.host = host
        self.port = port
        self.outbox = outbox

    def login(self, user, password):
        pass

    def send_message(self, msg):
        self.outbox.append(msg)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


@pytest.fixture
def outbox(monkeypatch) -> list:
    """Capture outgoing mail with SMTP configured for the app."""
    import smtplib
    from petpal import dependencies

    messages = []
    monkeypatch.setattr(
        smtplib, "SMTP_SSL", lambda host, port: DummySMTP(host, port, messages)
    )
    monkeypatch.setattr(dependencies.settings, "smtp_host", "smtp.example.com")
    return messages
