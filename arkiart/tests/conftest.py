"""
Shared fixtures: an application on an in-memory SQLite database.
"""
import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from arkiart.main import create_app
from arkiart.database import create_engine, create_session_factory, init_db
from arkiart.auth.accounts import AccountDirectory

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture()
def app():
    app = create_app(database_url=TEST_DATABASE_URL)
    yield app
    app.dependency_overrides.clear()


@pytest_asyncio.fixture()
async def client(app):
    # ASGITransport does not run the lifespan; enter it so the engine and tables exist
    async with app.router.lifespan_context(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(base_url="http://test", transport=transport) as ac:
            yield ac


@pytest.fixture()
def run_with_directory(app, client):
    """Await ``func(directory)`` against the app's database and return its result."""
    async def run(func):
        async with app.state.session_factory() as session:
            return await func(AccountDirectory(session))
    return run


@pytest_asyncio.fixture()
async def directory():
    engine = create_engine(TEST_DATABASE_URL)
    await init_db(engine)
    session_factory = create_session_factory(engine)
    async with session_factory() as session:
        yield AccountDirectory(session)
    await engine.dispose()
