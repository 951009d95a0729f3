import os
import pytest
import pytest_asyncio
import sqlalchemy
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401  registers tables on SQLModel.metadata
from src.adapter.services.customer_directory import StaticCustomerDirectory
from src.depends import get_customer_directory, get_session

KNOWN_CUSTOMERS = ["cust_42", "cust_7"]


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """Create test database engine (SQLite file by default, TEST_DB_URI to override)"""
    test_db_url = os.environ.get("TEST_DB_URI") or f"sqlite+aiosqlite:///{tmp_path / 'invoices_test.db'}"

    options = {}
    if test_db_url.startswith("postgresql"):
        options = {"pool_size": 20, "max_overflow": 20}

    engine = create_async_engine(test_db_url, echo=False, future=True, **options)

    async with engine.begin() as conn:
        if engine.dialect.name == "postgresql":
            await conn.execute(sqlalchemy.text("DROP SCHEMA IF EXISTS public CASCADE"))
            await conn.execute(sqlalchemy.text("CREATE SCHEMA public"))
        else:
            await conn.run_sync(SQLModel.metadata.drop_all)
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    if engine.dialect.name == "postgresql":
        async with engine.begin() as conn:
            await conn.execute(sqlalchemy.text("DROP SCHEMA IF EXISTS public CASCADE"))
            await conn.execute(sqlalchemy.text("CREATE SCHEMA public"))

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest.fixture
def customer_directory():
    return StaticCustomerDirectory(KNOWN_CUSTOMERS)


@pytest_asyncio.fixture
async def client(db_session, customer_directory):
    """Create test client with database session and customer directory overrides"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_customer_directory] = lambda: customer_directory

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
