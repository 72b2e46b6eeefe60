"""Shared fixtures for the scoring engine tests.

DB-backed tests run against a fresh in-memory SQLite database per test.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eom.core.security import create_access_token
from eom.database import Base, get_db
from eom.main import app
from eom.models.employee import (
    CATEGORY_ASN,
    CATEGORY_NON_ASN,
    ROLE_CENTRAL_ADMIN,
    ROLE_PEER,
    ROLE_UNIT_ADMIN,
    Employee,
)
from eom.models.rating import PeerRating


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
async def people(db):
    """A small directory: two admins, and staff across two units and both categories."""
    employees = {
        "pusat": Employee(name="Admin Pusat", email="pusat@example.go.id", role=ROLE_CENTRAL_ADMIN, work_unit_id=None),
        "unit_admin": Employee(name="Admin Unit", email="unit@example.go.id", role=ROLE_UNIT_ADMIN, work_unit_id=1),
        "other_admin": Employee(name="Admin Unit 2", email="unit2@example.go.id", role=ROLE_UNIT_ADMIN, work_unit_id=2),
        "ani": Employee(name="Ani", email="ani@example.go.id", role=ROLE_PEER, employee_category=CATEGORY_ASN, work_unit_id=1),
        "budi": Employee(name="Budi", email="budi@example.go.id", role=ROLE_PEER, employee_category=CATEGORY_ASN, work_unit_id=1),
        "citra": Employee(name="Citra", email="citra@example.go.id", role=ROLE_PEER, employee_category=CATEGORY_NON_ASN, work_unit_id=1),
        "dedi": Employee(name="Dedi", email="dedi@example.go.id", role=ROLE_PEER, employee_category=CATEGORY_ASN, work_unit_id=2),
    }
    db.add_all(employees.values())
    await db.commit()
    return employees


async def add_ratings(db, subject, period, points, rater=None):
    """Store one peer rating per entry in ``points`` for ``subject``."""
    rows = []
    for index, total in enumerate(points):
        rows.append(PeerRating(
            rater_id=rater.id if rater else subject.id,
            rated_employee_id=subject.id,
            rating_period=period,
            detailed_ratings={},
            criteria_totals={"teamwork": total // 2, "integrity": total - total // 2},
            total_points=total,
            max_possible_points=200,
            reason=f"Rating {index + 1}",
        ))
    db.add_all(rows)
    await db.commit()
    return rows


def auth_header(employee) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(employee.id)})}"}


@pytest.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def rate(db):
    async def _rate(subject, period, points, rater=None):
        return await add_ratings(db, subject, period, points, rater)
    return _rate


@pytest.fixture
def auth():
    return auth_header
