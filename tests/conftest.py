"""Shared fixtures: a fresh SQLite database and app per test."""

from itertools import count

import pytest
from httpx import ASGITransport, AsyncClient

from ratings_api.main import create_app
from ratings_api.models import Role, Store, User
from ratings_api.services.credentials import Identity
from ratings_api.settings import Settings
from ratings_api.stores.postgres import close_db, create_tables, drop_tables, get_session, init_db

DEFAULT_PASSWORD = "Secret#123"


@pytest.fixture
def password() -> str:
    """Plain-text password of every user made by make_user."""
    return DEFAULT_PASSWORD


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'ratings.db'}",
        jwt_secret="test-secret",
        bcrypt_rounds=4,
    )


@pytest.fixture
async def db(settings: Settings):
    """Initialized database with all tables."""
    await init_db(settings)
    await create_tables()
    yield
    await drop_tables()
    await close_db()


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def credentials(app):
    return app.state.credentials


@pytest.fixture
async def client(app, db):
    """Create test client."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def make_user(db, credentials):
    """Insert a user directly, bypassing the API."""
    seq = count(1)

    async def _make(
        role: Role = Role.NORMAL_USER,
        *,
        email: str | None = None,
        name: str | None = None,
        address: str | None = "221B Baker Street, London",
        password: str = DEFAULT_PASSWORD,
    ) -> User:
        n = next(seq)
        async with get_session() as session:
            user = User(
                name=name or f"Test {role.value.title()} Number {n:04d}",
                email=email or f"{role.value.lower()}{n}@ratings.io",
                address=address,
                password_hash=credentials.hash_password(password),
                role=role,
            )
            session.add(user)
            await session.flush()
            await session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_store(db):
    """Insert a store directly for the given owner."""
    seq = count(1)

    async def _make(owner: User, *, name: str | None = None, address: str = "1 Market Square") -> Store:
        n = next(seq)
        async with get_session() as session:
            store = Store(
                name=name or f"Store {n}",
                email=f"store{n}@ratings.io",
                address=address,
                owner_id=owner.id,
                average_rating=0,
                ratings_count=0,
            )
            session.add(store)
            await session.flush()
            await session.refresh(store)
        return store

    return _make


@pytest.fixture
def auth_headers(credentials):
    """Bearer header for a user."""

    def _headers(user: User) -> dict[str, str]:
        token = credentials.issue_token(Identity(id=user.id, email=user.email, role=user.role))
        return {"Authorization": f"Bearer {token}"}

    return _headers
