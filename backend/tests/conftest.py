"""Shared test fixtures.

Environment is pinned before any subsmart import so the app starts without a
scheduler, webhook or Gemini key.
"""

import os

os.environ["SCHEDULER_ENABLED"] = "false"
os.environ["DISCORD_WEBHOOK_URL"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ["DEFAULT_CURRENCY"] = "TWD"

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from subsmart.db import get_db
from subsmart.main import app
from subsmart.models.subscription import BillingCycle, Category, Subscription


@pytest.fixture
def db_engine(tmp_path):
    """Async engine on a throwaway SQLite file; NullPool so no connection outlives its event loop."""
    return create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
def client(db_engine, session_factory, monkeypatch):
    """Test client with the database swapped for the temporary one."""
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    monkeypatch.setattr("subsmart.main.engine", db_engine)
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_subscription():
    """Factory for unsaved Subscription rows used by the pure engine tests."""
    counter = {"n": 0}

    def _make(**overrides) -> Subscription:
        counter["n"] += 1
        fields = {
            "id": f"sub-{counter['n']}",
            "name": f"Service {counter['n']}",
            "price": Decimal("15.99"),
            "currency": "USD",
            "billing_cycle": BillingCycle.monthly,
            "first_bill_date": date(2024, 1, 15),
            "category": Category.entertainment,
            "active": True,
        }
        fields.update(overrides)
        return Subscription(**fields)

    return _make
