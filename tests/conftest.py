import httpx
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.database import Base, get_db
from app.api.deps import get_auth_client
from app.models.company import Company, company_id_for_owner
from app.models.user import User, UserRole
from app.services.supabase_auth import SupabaseAuthClient
from tests.helpers import (
    FakeSupabaseAuth,
    TEST_ANON_KEY,
    TEST_JWT_SECRET,
    TEST_SUPABASE_URL,
    make_access_token,
)


@pytest_asyncio.fixture
async def test_db(tmp_path):
    """Create test database and tables."""
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path}/test.db",
        poolclass=NullPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def fake_supabase():
    return FakeSupabaseAuth()


@pytest_asyncio.fixture
async def auth_client(fake_supabase):
    client = SupabaseAuthClient(
        base_url=TEST_SUPABASE_URL,
        anon_key=TEST_ANON_KEY,
        jwt_secret=TEST_JWT_SECRET,
        transport=httpx.MockTransport(fake_supabase.handler),
    )
    yield client
    await client.aclose()


async def _create_owner(db: AsyncSession, user_id: str, email: str, role: str, company_name: str) -> User:
    company = Company(id=company_id_for_owner(user_id), name=company_name, is_solo=role == UserRole.solo_owner.value)
    db.add(company)
    await db.flush()
    user = User(
        id=user_id,
        email=email,
        first_name="Test",
        last_name="Owner",
        role=role,
        is_owner=True,
        company_id=company.id,
        has_completed_onboarding=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def test_user(test_db: AsyncSession):
    """An onboarded admin who owns 'Acme HVAC'."""
    return await _create_owner(test_db, "owner-1", "owner@acme-hvac.test", UserRole.admin.value, "Acme HVAC")


async def _add_member(db: AsyncSession, owner: User, user_id: str, role: str) -> User:
    user = User(
        id=user_id,
        email=f"{user_id}@acme-hvac.test",
        first_name="Crew",
        last_name="Member",
        role=role,
        company_id=owner.company_id,
        has_completed_onboarding=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def technician(test_db: AsyncSession, test_user: User):
    """A field tech in test_user's company."""
    return await _add_member(test_db, test_user, "tech-1", UserRole.tech.value)


@pytest_asyncio.fixture
async def dispatcher(test_db: AsyncSession, test_user: User):
    return await _add_member(test_db, test_user, "disp-1", UserRole.dispatcher.value)


@pytest_asyncio.fixture
async def solo_user(test_db: AsyncSession):
    return await _create_owner(test_db, "solo-1", "solo@onetruck.test", UserRole.solo_owner.value, "One Truck HVAC")


@pytest_asyncio.fixture
async def other_user(test_db: AsyncSession):
    """Owner of a second, unrelated company."""
    return await _create_owner(test_db, "rival-1", "owner@rival-air.test", UserRole.admin.value, "Rival Air")


@pytest_asyncio.fixture
async def client(test_db: AsyncSession, auth_client: SupabaseAuthClient):
    """Create test client with overridden database and identity provider."""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_auth_client] = lambda: auth_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def authenticated_client(client: AsyncClient, test_user: User):
    """Create authenticated test client."""
    client.headers["Authorization"] = f"Bearer {make_access_token(test_user.id, test_user.email)}"
    return client
