"""
Shared fixtures: a throwaway SQLite database per test and an app wired to it.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from auth.jwt import TokenService
from auth.password import PasswordHasher
from auth.service import AuthService
from config.settings import Settings
from database.session import build_engine, build_session_factory, init_models
from database.store import CredentialStore

TEST_SECRET = "test-secret-key"


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'auth.db'}",
        jwt_secret=TEST_SECRET,
        bcrypt_rounds=4,
        upload_dir=str(tmp_path / "uploads"),
        max_upload_bytes=1024,
    )


@pytest_asyncio.fixture
async def engine(settings):
    engine = build_engine(settings.database_url)
    await init_models(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(session) -> CredentialStore:
    return CredentialStore(session)


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def tokens() -> TokenService:
    return TokenService(TEST_SECRET)


@pytest.fixture
def service(store, hasher, tokens) -> AuthService:
    return AuthService(store=store, hasher=hasher, tokens=tokens)


@pytest_asyncio.fixture
async def app(settings):
    from main import create_app

    app = create_app(settings)
    await init_models(app.state.engine)
    yield app
    await app.state.engine.dispose()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
