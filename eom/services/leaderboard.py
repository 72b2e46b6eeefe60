import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eom.database import store_guard
from eom.models.employee import Employee
from eom.models.evaluation import FinalEvaluation, UnitEvaluation
from eom.models.rating import PeerRating
from eom.services.periods import months_of_year, parse_period
from eom.services.resolver import SourceTier, resolve

logger = logging.getLogger(__name__)


@dataclass
class SubjectRecords:
    """Everything the resolver needs for one rated employee."""

    subject_id: int
    category: str
    name: Optional[str] = None
    ratings: List = field(default_factory=list)
    unit_evals: Dict[str, object] = field(default_factory=dict)
    final_evals: Dict[str, object] = field(default_factory=dict)

    def ratings_for(self, period: str) -> List:
        return [r for r in self.ratings if r.rating_period == period]


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    subject_id: int
    score: int
    rating_count: int
    name: Optional[str] = None
    source_tier: Optional[SourceTier] = None  # monthly view only
    periods: Tuple[str, ...] = ()

    @property
    def is_leader(self) -> bool:
        return self.rank == 1


def _ranked(rows: List[dict]) -> List[LeaderboardEntry]:
    # sorted() is stable: equal scores keep the subjects' input order
    rows = sorted(rows, key=lambda row: row["score"], reverse=True)
    return [LeaderboardEntry(rank=index, **row) for index, row in enumerate(rows, start=1)]


def aggregate_monthly(period: str, category: str, subjects: Sequence[SubjectRecords]) -> List[LeaderboardEntry]:
    parse_period(period)
    rows = []
    for subject in subjects:
        if subject.category != category:
            continue
        ratings = subject.ratings_for(period)
        resolved = resolve(
            subject.subject_id,
            period,
            ratings,
            subject.unit_evals.get(period),
            subject.final_evals.get(period),
        )
        if resolved is None:
            continue
        rows.append({
            "subject_id": subject.subject_id,
            "name": subject.name,
            "score": resolved.score,
            "rating_count": len(ratings),
            "source_tier": resolved.source_tier,
            "periods": (period,),
        })
    return _ranked(rows)


def aggregate_yearly(year: int, category: str, subjects: Sequence[SubjectRecords]) -> List[LeaderboardEntry]:
    """Rank by the sum of resolved monthly scores over the months a subject was rated."""
    months = months_of_year(year)
    rows = []
    for subject in subjects:
        if subject.category != category:
            continue
        total = 0
        rating_count = 0
        rated_months = []
        for period in months:
            ratings = subject.ratings_for(period)
            if not ratings:
                continue
            resolved = resolve(
                subject.subject_id,
                period,
                ratings,
                subject.unit_evals.get(period),
                subject.final_evals.get(period),
            )
            total += resolved.score
            rating_count += len(ratings)
            rated_months.append(period)
        if not rated_months:
            continue
        rows.append({
            "subject_id": subject.subject_id,
            "name": subject.name,
            "score": total,
            "rating_count": rating_count,
            "periods": tuple(rated_months),
        })
    return _ranked(rows)


async def load_subjects(db: AsyncSession, periods: Sequence[str], category: Optional[str] = None) -> List[SubjectRecords]:
    """Read the ratings and evaluations for ``periods`` into SubjectRecords.

    Subjects come back in employee id order, which is the leaderboard's
    tie order.
    """
    periods = list(periods)
    async with store_guard(db, "leaderboard read"):
        employee_query = select(Employee).order_by(Employee.id)
        if category is not None:
            employee_query = employee_query.where(Employee.employee_category == category)
        employees = (await db.execute(employee_query)).scalars().all()

        ratings = (await db.execute(
            select(PeerRating)
            .where(PeerRating.rating_period.in_(periods))
            .order_by(PeerRating.id)
        )).scalars().all()
        unit_evals = (await db.execute(
            select(UnitEvaluation).where(UnitEvaluation.rating_period.in_(periods))
        )).scalars().all()
        final_evals = (await db.execute(
            select(FinalEvaluation).where(FinalEvaluation.rating_period.in_(periods))
        )).scalars().all()

    subjects = {
        emp.id: SubjectRecords(subject_id=emp.id, category=emp.employee_category, name=emp.name)
        for emp in employees
    }
    for rating in ratings:
        if rating.rated_employee_id in subjects:
            subjects[rating.rated_employee_id].ratings.append(rating)
    for unit_eval in unit_evals:
        if unit_eval.rated_employee_id in subjects:
            subjects[unit_eval.rated_employee_id].unit_evals[unit_eval.rating_period] = unit_eval
    for final_eval in final_evals:
        if final_eval.rated_employee_id in subjects:
            subjects[final_eval.rated_employee_id].final_evals[final_eval.rating_period] = final_eval

    logger.debug("Loaded %d subjects and %d ratings for %s", len(subjects), len(ratings), periods)
    return list(subjects.values())


async def monthly_leaderboard(db: AsyncSession, period: str, category: str) -> List[LeaderboardEntry]:
    parse_period(period)
    subjects = await load_subjects(db, [period], category)
    return aggregate_monthly(period, category, subjects)


async def yearly_leaderboard(db: AsyncSession, year: int, category: str) -> List[LeaderboardEntry]:
    subjects = await load_subjects(db, months_of_year(year), category)
    return aggregate_yearly(year, category, subjects)
