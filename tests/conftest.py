"""
Shared fixtures: an in-memory SQLite database per test, a store bound to it,
seed helpers and an HTTP client for the API.
"""

import os

# Must be set before foodcourt.database builds its engine
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from foodcourt.core.config import get_settings
from foodcourt.database import Base, get_db
from foodcourt.models import Role, User
from foodcourt.services import MenuCatalog, RestaurantDirectory
from foodcourt.store import DocumentStore


@pytest.fixture(autouse=True)
def fresh_settings(monkeypatch, tmp_path):
    """Each test sees default settings with exports going to its own tmp dir."""
    monkeypatch.setenv("DATA_DIRECTORY", str(tmp_path / "data"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture
async def store(session_maker):
    async with session_maker() as session:
        yield DocumentStore(session)


@pytest.fixture
async def client(session_maker):
    from foodcourt.main import app

    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# =============================================================================
# SEED HELPERS
# =============================================================================

def headers(user_id: str, role: Role) -> dict[str, str]:
    return {"X-User-Id": user_id, "X-User-Role": role.value}


async def make_user(store: DocumentStore, role: Role = Role.USER, name: str = "Test User") -> User:
    suffix = uuid.uuid4().hex[:8]
    return await store.create(User, name=name, email=f"{suffix}@example.com", role=role)


async def make_restaurant(store: DocumentStore, owner_id: str = None, name: str = "Spice Route", approve: bool = True):
    """Create a restaurant, approved (and therefore open) unless told otherwise."""
    directory = RestaurantDirectory(store)
    owner_id = owner_id or uuid.uuid4().hex
    restaurant = await directory.create(owner_id=owner_id, name=name, address="12 Market Street")
    if approve:
        restaurant = await directory.approve(restaurant.id, admin_id="admin-1")
    return restaurant


async def make_item(store: DocumentStore, owner_id: str, name: str = "Paneer Tikka", price: float = 10.0, **fields):
    return await MenuCatalog(store).add_item(owner_id, {"name": name, "price": price, **fields})
