"""
Blog Backend — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set at the top of this module, before
       anything imports blog_backend.config, so the settings singleton and
       the engine are built against a throwaway SQLite file and upload root.

Fixture Hierarchy:
    Function-scoped:
    ├── mock_db_session: AsyncMock session for service unit tests
    ├── db_schema:       creates all tables before a test, drops them after
    ├── db_session:      real AsyncSession on the test database
    ├── upload_dir:      empties the upload root before a test
    ├── test_client:     HTTPX AsyncClient over ASGITransport
    └── create_user:     inserts a user with a given role, returns (id, token)
"""

import os
import shutil
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

_TEST_DIR = tempfile.mkdtemp(prefix="blog_backend_test_")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DIR}/test.db"
os.environ["JWT_SECRET"] = "test-secret-key-0123456789abcdef"
os.environ["UPLOAD_ROOT"] = os.path.join(_TEST_DIR, "uploads")
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from blog_backend.auth.passwords import hash_password  # noqa: E402
from blog_backend.auth.roles import Role  # noqa: E402
from blog_backend.auth.tokens import get_token_service  # noqa: E402
from blog_backend.config import settings  # noqa: E402
from blog_backend.database import Base, async_session_factory, engine  # noqa: E402
from blog_backend.models import User  # noqa: E402

DEFAULT_PASSWORD = "secret123"


def pytest_sessionfinish(session, exitstatus):
    shutil.rmtree(_TEST_DIR, ignore_errors=True)


# ══════════════════════════════════════════════════════════════════════════
# Unit-test Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_blog(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = blog
            result = await blog_service.get_blog(mock_db_session, str(blog.id))
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database / API Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_schema():
    """Fresh tables for every test that touches the database."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest_asyncio.fixture
async def db_session(db_schema):
    async with async_session_factory() as session:
        yield session


@pytest.fixture
def upload_dir():
    root = Path(settings.upload_root)
    if root.exists():
        shutil.rmtree(root)
    root.mkdir(parents=True)
    return root


@pytest_asyncio.fixture
async def test_client(db_schema, upload_dir):
    """
    HTTPX AsyncClient talking to the FastAPI app in-process.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from blog_backend.main import app

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture
async def create_user(db_schema):
    """
    Factory fixture: insert a user directly and sign a token for it.

    Usage:
        user_id, token = await create_user("vip_user", Role.VIP)
    """

    async def _create(
        username: str,
        role: Role = Role.NORMAL,
        password: str = DEFAULT_PASSWORD,
        is_active: bool = True,
    ):
        async with async_session_factory() as session:
            user = User(
                username=username,
                password=await hash_password(password),
                role=int(role),
                is_active=is_active,
            )
            session.add(user)
            await session.commit()
            user_id = str(user.id)
        return user_id, get_token_service().issue(user_id)

    return _create
