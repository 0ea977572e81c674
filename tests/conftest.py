"""Shared test fixtures — async DB, tabular store, client, auth helpers, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Settings are read at import time: configure them before any hrms import
os.environ.setdefault("JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("TIMEZONE", "Asia/Kolkata")

from datetime import date
from decimal import Decimal
from typing import Any, AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

import hrms.models  # noqa: F401  (registers every table)
from hrms.auth.schemas import CallerContext
from hrms.auth.service import create_access_token
from hrms.common.constants import EmployeeStatus, Table, UserRole
from hrms.database import Base, get_db
from hrms.main import create_app
from hrms.store.service import Record, TabularStore

# ── Test database (SQLite in-memory) ────────────────────────────────

TEST_DATABASE_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DATABASE_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestSessionFactory = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False,
)


@pytest.fixture(autouse=True)
async def _setup_db():
    """Create all tables before each test, drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def _reset_rate_limiter():
    """Reset rate limiter storage between tests to prevent cross-test interference."""
    from hrms.common.rate_limit import limiter

    limiter.reset()
    yield


async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app():
    """Create a fresh app instance with DB dependency overridden."""
    application = create_app()
    application.dependency_overrides[get_db] = _override_get_db
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Database session / store (for direct operations in tests) ───────

@pytest.fixture
async def db() -> AsyncGenerator[AsyncSession, None]:
    async with TestSessionFactory() as session:
        yield session
        await session.commit()


@pytest.fixture
async def store(db) -> TabularStore:
    return TabularStore(db)


# ── Factories ───────────────────────────────────────────────────────

def _make_employee(
    *,
    emp_id: str = "EMP-001",
    name: str = "Test User",
    email: str = "test.user@example.com",
    role: UserRole = UserRole.employee,
    manager_id: Optional[str] = None,
    bal_cl: Decimal = Decimal("10"),
    bal_sl: Decimal = Decimal("7"),
    doj: Optional[date] = date(2024, 1, 15),
    last_balance_update: Optional[date] = None,
    status: EmployeeStatus = EmployeeStatus.active,
) -> dict[str, Any]:
    return dict(
        emp_id=emp_id,
        name=name,
        email=email,
        role=role.value,
        department="Engineering",
        designation="Engineer",
        doj=doj,
        dob=date(1995, 5, 20),
        mobile="9876543210",
        status=status.value,
        bal_cl=bal_cl,
        bal_sl=bal_sl,
        bal_mat=Decimal("0"),
        bal_pat=Decimal("0"),
        last_balance_update=last_balance_update if last_balance_update else doj,
        manager_id=manager_id,
    )


async def seed_employee(store: TabularStore, **overrides: Any) -> Record:
    """Insert an employee row and return it as stored."""
    return await store.append_row(Table.employees, _make_employee(**overrides))


def caller_of(record: Record) -> CallerContext:
    return CallerContext.from_record(record)


@pytest.fixture
def read_logs():
    """Audit entries as committed, read through a fresh session."""

    async def _read(action: Optional[str] = None) -> list[Record]:
        async with TestSessionFactory() as session:
            store = TabularStore(session)
            if action is None:
                return await store.read_table(Table.system_logs)
            return await store.read_table(Table.system_logs, action=action)

    return _read


# ── Auth helpers ────────────────────────────────────────────────────

def auth_headers_for(email: str) -> dict[str, str]:
    token, _ = create_access_token(email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def org(db, store) -> dict[str, Record]:
    """A small committed organisation: HR, a manager, two reports, an outsider."""
    people = {
        "hr": await seed_employee(
            store, emp_id="HR-001", name="Hema HR", email="hr@example.com", role=UserRole.hr,
        ),
        "manager": await seed_employee(
            store, emp_id="MGR-001", name="Manu Manager", email="manager@example.com",
            role=UserRole.manager,
        ),
        "employee": await seed_employee(
            store, emp_id="EMP-001", name="Esha Employee", email="employee@example.com",
            manager_id="MGR-001", bal_cl=Decimal("3"),
        ),
        "peer": await seed_employee(
            store, emp_id="EMP-002", name="Pavan Peer", email="peer@example.com",
            manager_id="MGR-001",
        ),
        "outsider": await seed_employee(
            store, emp_id="EMP-003", name="Omar Outsider", email="outsider@example.com",
        ),
    }
    await db.commit()
    return people
