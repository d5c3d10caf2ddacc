"""Shared test fixtures — record store, app, client, auth helpers, factories.

Uses SQLite + aiosqlite for fast isolated tests without PostgreSQL.
"""

from __future__ import annotations

import os

# Required settings must exist before any import touches pydantic-settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("AUTH_JWT_SECRET", "test-secret-for-ci-do-not-use-in-production")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import AsyncGenerator, Optional

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from hr_records.common.cache import QueryCache
from hr_records.config import settings
from hr_records.dashboard.hooks import DashboardHooks
from hr_records.database import Base, RecordStore
from hr_records.departments.hooks import DepartmentHooks
from hr_records.departments.models import Department
from hr_records.employees.hooks import EmployeeHooks
from hr_records.employees.models import Employee
from hr_records.job_history.hooks import JobHistoryHooks
from hr_records.job_history.models import Job, JobHistory
from hr_records.main import create_app
from hr_records.notifications.service import Notifier

TEST_DATABASE_URL = "sqlite+aiosqlite://"


# ── Test record store (SQLite in-memory) ────────────────────────────

@pytest.fixture
async def store() -> AsyncGenerator[RecordStore, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield RecordStore(engine)
    await engine.dispose()


@pytest.fixture
def cache() -> QueryCache:
    return QueryCache(stale_after=settings.QUERY_STALE_SECONDS)


@pytest.fixture
def notifier() -> Notifier:
    return Notifier(buffer_size=settings.NOTIFICATION_BUFFER_SIZE)


# ── Hooks ───────────────────────────────────────────────────────────

@pytest.fixture
def employee_hooks(store, cache, notifier) -> EmployeeHooks:
    return EmployeeHooks(store, cache, notifier)


@pytest.fixture
def department_hooks(store, cache, notifier) -> DepartmentHooks:
    return DepartmentHooks(store, cache, notifier)


@pytest.fixture
def job_history_hooks(store, cache, notifier) -> JobHistoryHooks:
    return JobHistoryHooks(store, cache, notifier)


@pytest.fixture
def dashboard_hooks(store, cache, notifier) -> DashboardHooks:
    return DashboardHooks(store, cache, notifier)


# ── FastAPI test client ─────────────────────────────────────────────

@pytest.fixture
async def app(store, cache, notifier):
    """App wired to the test store; the lifespan is not run by ASGITransport."""
    yield create_app(store=store, cache=cache, notifier=notifier)


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Async HTTP client wired to the test app."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# ── Auth helpers ────────────────────────────────────────────────────

def _make_token(
    *,
    sub: str = "3f0b1c9e-user",
    email: str = "hr.admin@example.com",
    audience: str = "authenticated",
    expires_in: timedelta = timedelta(hours=1),
    secret: Optional[str] = None,
) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": sub,
        "email": email,
        "role": "authenticated",
        "aud": audience,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_in).timestamp()),
    }
    return jwt.encode(
        payload,
        secret or settings.AUTH_JWT_SECRET,
        algorithm=settings.AUTH_JWT_ALGORITHM,
    )


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {_make_token()}"}


# ── Model factories ─────────────────────────────────────────────────

def _make_employee(
    *,
    empno: str = "E001",
    firstname: str = "Maria",
    lastname: str = "Ang",
    gender: Optional[str] = "F",
    email: Optional[str] = None,
    hiredate: date = date(2020, 1, 6),
) -> dict:
    return dict(
        empno=empno,
        firstname=firstname,
        lastname=lastname,
        gender=gender,
        birthdate=date(1990, 5, 17),
        email=email,
        hiredate=hiredate,
        sepdate=None,
    )


def _make_department(*, deptcode: str = "D01", deptname: str = "Engineering") -> dict:
    return dict(deptcode=deptcode, deptname=deptname)


def _make_job(*, jobcode: str = "J01", jobdesc: str = "Software Engineer") -> dict:
    return dict(jobcode=jobcode, jobdesc=jobdesc)


def _make_job_history(
    *,
    empno: str = "E001",
    effdate: date = date(2020, 1, 6),
    jobcode: str = "J01",
    deptcode: Optional[str] = "D01",
    salary: Optional[str] = "5000.00",
) -> dict:
    return dict(
        empno=empno,
        effdate=effdate,
        jobcode=jobcode,
        deptcode=deptcode,
        salary=Decimal(salary) if salary is not None else None,
    )


async def _seed(store: RecordStore, *objects) -> None:
    async with store.session() as db:
        db.add_all(objects)


@pytest.fixture
async def org(store) -> None:
    """Two departments, two jobs and three employees with one assignment each."""
    await _seed(
        store,
        Department(**_make_department(deptcode="D01", deptname="Engineering")),
        Department(**_make_department(deptcode="D02", deptname="Finance")),
        Job(**_make_job(jobcode="J01", jobdesc="Software Engineer")),
        Job(**_make_job(jobcode="J02", jobdesc="Accountant")),
        Employee(**_make_employee(empno="E001", firstname="Maria", lastname="Ang")),
        Employee(**_make_employee(empno="E002", firstname="Jose", lastname="Lopez", gender="M")),
        Employee(**_make_employee(empno="E003", firstname="Wei", lastname="Chen", gender="O")),
    )
    await _seed(
        store,
        JobHistory(**_make_job_history(empno="E001", deptcode="D01", salary="5000.00")),
        JobHistory(**_make_job_history(empno="E002", deptcode="D01", jobcode="J02", salary="4000.50")),
        JobHistory(**_make_job_history(empno="E003", deptcode="D02", jobcode="J02", salary="3000.25")),
    )
