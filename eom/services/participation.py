import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from fractions import Fraction
from typing import List

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from eom.database import store_guard, upsert
from eom.models.employee import CATEGORY_NON_ASN, ROLE_PEER, Employee
from eom.models.participation import ParticipatingUnit
from eom.models.rating import PeerRating
from eom.services.periods import parse_period
from eom.services.rounding import round_half_away

logger = logging.getLogger(__name__)


async def list_units(db: AsyncSession) -> List[ParticipatingUnit]:
    async with store_guard(db, "participating units read"):
        result = await db.execute(select(ParticipatingUnit).order_by(ParticipatingUnit.work_unit_id))
        return list(result.scalars().all())


async def set_unit_participation(db: AsyncSession, work_unit_id: int, is_active: bool) -> ParticipatingUnit:
    unit = await upsert(
        db,
        ParticipatingUnit,
        {"work_unit_id": work_unit_id, "is_active": is_active, "updated_at": datetime.now(timezone.utc)},
        key=("work_unit_id",),
    )
    logger.info("Work unit %s %s", work_unit_id, "joined" if is_active else "left")
    return unit


async def is_unit_participating(db: AsyncSession, work_unit_id: int) -> bool:
    """Whether a work unit takes part in the programme.

    With no units configured at all every unit takes part; once any unit is
    configured, an unlisted unit does not.
    """
    async with store_guard(db, "participating units read"):
        configured = (await db.execute(select(func.count(ParticipatingUnit.id)))).scalar_one()
        if not configured:
            return True
        result = await db.execute(
            select(ParticipatingUnit.is_active).where(ParticipatingUnit.work_unit_id == work_unit_id)
        )
        return bool(result.scalar_one_or_none())


@dataclass
class RaterStatus:
    employee_id: int
    name: str
    employee_category: str
    rated_asn: bool = False
    rated_non_asn: bool = False

    @property
    def has_rated(self) -> bool:
        return self.rated_asn or self.rated_non_asn


@dataclass
class UnitCompletion:
    work_unit_id: int
    employees: List[RaterStatus] = field(default_factory=list)

    @property
    def total_employees(self) -> int:
        return len(self.employees)

    @property
    def rated_count(self) -> int:
        return sum(1 for e in self.employees if e.has_rated)

    @property
    def completion_percentage(self) -> int:
        if not self.employees:
            return 0
        return round_half_away(Fraction(self.rated_count * 100, self.total_employees))


async def rating_completion(db: AsyncSession, period: str) -> List[UnitCompletion]:
    """Which staff of each active unit have submitted peer ratings for ``period``.

    A rater counts per category of the employees they rated.
    """
    parse_period(period)
    async with store_guard(db, "rating completion read"):
        active = (await db.execute(
            select(ParticipatingUnit.work_unit_id)
            .where(ParticipatingUnit.is_active.is_(True))
            .order_by(ParticipatingUnit.work_unit_id)
        )).scalars().all()
        staff = (await db.execute(
            select(Employee)
            .where(Employee.role == ROLE_PEER)
            .where(Employee.work_unit_id.in_(active))
            .order_by(Employee.id)
        )).scalars().all()
        rated = (await db.execute(
            select(PeerRating.rater_id, Employee.employee_category)
            .join(Employee, Employee.id == PeerRating.rated_employee_id)
            .where(PeerRating.rating_period == period)
        )).all()

    categories = {}
    for rater_id, category in rated:
        categories.setdefault(rater_id, set()).add(category)

    units = {unit_id: UnitCompletion(unit_id) for unit_id in active}
    for employee in staff:
        seen = categories.get(employee.id, set())
        units[employee.work_unit_id].employees.append(RaterStatus(
            employee_id=employee.id,
            name=employee.name,
            employee_category=employee.employee_category,
            rated_asn=bool(seen - {CATEGORY_NON_ASN}),
            rated_non_asn=CATEGORY_NON_ASN in seen,
        ))
    return list(units.values())
