import os

# Settings are read at import time, so configure them before importing the app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["SENDGRID_API_KEY"] = ""
os.environ["OPENROUTER_API_KEY"] = ""

import uuid

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from moneywise.api.deps import get_current_user
from moneywise.core.auth import User
from moneywise.core.database import Base, get_async_session
from moneywise.main import app
from moneywise.utils.advice import RuleBasedAdvisor, get_financial_advisor
from moneywise.utils.insights import RuleBasedInsightGenerator, get_insight_generator


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def user(db):
    user = User(
        id=uuid.uuid4(),
        email="ana@example.com",
        hashed_password="not-a-real-hash",
        is_active=True,
        is_superuser=False,
        is_verified=True,
        full_name="Ana",
    )
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def client(session_factory, user):
    async def override_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_async_session] = override_session
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_insight_generator] = lambda: RuleBasedInsightGenerator()
    app.dependency_overrides[get_financial_advisor] = lambda: RuleBasedAdvisor()

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
