from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy import delete
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.core import models
from app.core.config import settings
from app.core.database import Base, get_db
from app.core.dependencies import get_query_executor, get_translator
from app.core.query.executor import ExecutionOptions, QueryExecutor
from app.core.query.translator import Translator


# =========================
# Fake database session
# =========================
class FakeResult:
    def __init__(self, rows: List[Dict[str, Any]], columns: List[str]):
        self._rows = rows
        self._columns = columns

    def keys(self):
        return list(self._columns)

    def mappings(self):
        return self

    def fetchmany(self, size: int):
        self.fetch_size = size
        return [dict(row) for row in self._rows[:size]]


class FakeConnection:
    def __init__(self, factory: "FakeSessionFactory"):
        self.factory = factory

    async def exec_driver_sql(self, statement: str):
        self.factory.statements.append(statement)
        if statement.startswith("SET "):
            return FakeResult([], [])
        if self.factory.error is not None:
            raise self.factory.error
        result = FakeResult(self.factory.rows, self.factory.columns)
        self.factory.last_result = result
        return result


class FakeSession:
    def __init__(self, factory: "FakeSessionFactory"):
        self.factory = factory

    async def __aenter__(self):
        self.factory.opened += 1
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.factory.closed += 1
        return False

    async def connection(self):
        return FakeConnection(self.factory)

    async def rollback(self):
        self.factory.rollbacks += 1

    async def commit(self):
        self.factory.commits += 1


class FakeSessionFactory:
    """Stands in for async_sessionmaker; records every statement and session."""

    def __init__(self):
        self.rows: List[Dict[str, Any]] = []
        self.columns: List[str] = []
        self.error: Optional[Exception] = None
        self.statements: List[str] = []
        self.opened = 0
        self.closed = 0
        self.rollbacks = 0
        self.commits = 0
        self.last_result: Optional[FakeResult] = None

    def __call__(self):
        return FakeSession(self)

    def returns(self, rows: List[Dict[str, Any]], columns: Optional[List[str]] = None):
        self.rows = rows
        self.columns = columns if columns is not None else (list(rows[0]) if rows else [])
        return self


# =========================
# Fake OpenAI client
# =========================
class FakeCompletions:
    def __init__(self):
        self.content: Optional[str] = "SELECT 1"
        self.choices: Optional[list] = None
        self.error: Optional[Exception] = None
        self.calls: List[Dict[str, Any]] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        if self.choices is not None:
            return SimpleNamespace(choices=self.choices)
        message = SimpleNamespace(role="assistant", content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(index=0, message=message)])


class FakeOpenAIClient:
    def __init__(self):
        self.completions = FakeCompletions()
        self.chat = SimpleNamespace(completions=self.completions)


# =========================
# Gateway fixtures
# =========================
@pytest.fixture
def session_factory():
    return FakeSessionFactory()


@pytest.fixture
def execution_options():
    return ExecutionOptions(timeout_ms=30000, max_rows=1000)


@pytest.fixture
def executor(session_factory, execution_options):
    return QueryExecutor(session_factory, execution_options)


@pytest.fixture
def llm_client():
    return FakeOpenAIClient()


@pytest.fixture
def translator(llm_client):
    return Translator(api_key=None, model="gpt-4o-mini", client=llm_client)


# Client
@pytest_asyncio.fixture(scope="function")
async def client(executor, translator):
    app.dependency_overrides[get_query_executor] = lambda: executor
    app.dependency_overrides[get_translator] = lambda: translator

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# =========================
# Real database (reports CRUD)
# =========================
# Force to use a test db for tests
TEST_DATABASE_URL = settings.DATABASE_URL + "_test"

# NullPool: every test gets fresh connections on its own event loop
test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
TestingSessionLocal = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


# Create tables if needed; skip when no test database is reachable
@pytest_asyncio.fixture(scope="function")
async def db_session():
    try:
        async with test_engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except (OSError, DBAPIError) as error:
        pytest.skip(f"Test database unavailable: {error}")

    async with TestingSessionLocal() as session:
        yield session
        await session.rollback()
        await session.execute(delete(models.Report))
        await session.commit()


@pytest_asyncio.fixture(scope="function")
async def db_client(db_session: AsyncSession):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# Report
@pytest_asyncio.fixture(scope="function")
async def test_report(db_session: AsyncSession):
    report = models.Report(
        name="Visits per doctor",
        question="How many visits did each doctor have?",
        chart_type="bar",
    )
    db_session.add(report)
    await db_session.commit()
    await db_session.refresh(report)
    return report


# Executor on the real test database; short timeout so pg_sleep trips it
@pytest_asyncio.fixture(scope="function")
async def db_executor(db_session: AsyncSession):
    return QueryExecutor(
        TestingSessionLocal, ExecutionOptions(timeout_ms=100, max_rows=1000)
    )
