import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from fractions import Fraction
from typing import Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eom.core.errors import NotFoundError, ValidationError
from eom.database import store_guard, upsert
from eom.models.employee import EMPLOYEE_CATEGORIES, Employee
from eom.models.winner import WINNER_MONTHLY, WINNER_TYPES, WINNER_YEARLY, DesignatedWinner
from eom.services.periods import parse_period, parse_year
from eom.services.rounding import round_half_away

logger = logging.getLogger(__name__)

WINNER_KEY = ("winner_type", "employee_category", "period")


def check_winner_key(winner_type: str, category: str, period: str) -> None:
    if winner_type not in WINNER_TYPES:
        raise ValidationError("winner_type", f"Unknown winner type {winner_type!r}")
    if category not in EMPLOYEE_CATEGORIES:
        raise ValidationError("employee_category", f"Unknown employee category {category!r}")
    if winner_type == WINNER_MONTHLY:
        parse_period(period)
    else:
        parse_year(period)


class WinnerRegistry:
    """Designated winners, at most one per (type, category, period).

    Leaderboard rank 1 is only a candidate; a winner exists here only after
    an administrator designates one.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def designate(
        self,
        winner_type: str,
        category: str,
        period: str,
        subject_id: int,
        final_points: int,
        actor_id: int,
    ) -> DesignatedWinner:
        check_winner_key(winner_type, category, period)

        async with store_guard(self.db, "winner lookup"):
            subject = await self.db.get(Employee, subject_id)
        if subject is None:
            raise NotFoundError(f"Employee {subject_id} not found")
        if subject.employee_category != category:
            raise ValidationError(
                "employee_category",
                f"Employee {subject_id} is {subject.employee_category}, not {category}",
            )

        winner = await upsert(
            self.db,
            DesignatedWinner,
            {
                "winner_type": winner_type,
                "employee_category": category,
                "period": period,
                "employee_id": subject_id,
                "final_points": final_points,
                "designated_by": actor_id,
                "updated_at": datetime.now(timezone.utc),
            },
            key=WINNER_KEY,
        )
        logger.info(
            "Designated %s winner %s/%s: employee %s (%s pts) by %s",
            winner_type, category, period, subject_id, final_points, actor_id,
        )
        return winner

    async def revoke(self, winner_id: int) -> None:
        async with store_guard(self.db, "winner revoke"):
            winner = await self.db.get(DesignatedWinner, winner_id)
            if winner is None:
                raise NotFoundError(f"Designated winner {winner_id} not found")
            logger.info(
                "Revoking %s winner %s/%s (employee %s)",
                winner.winner_type, winner.employee_category, winner.period, winner.employee_id,
            )
            await self.db.delete(winner)
            await self.db.commit()

    async def get(self, winner_type: str, category: str, period: str) -> Optional[DesignatedWinner]:
        async with store_guard(self.db, "winner lookup"):
            result = await self.db.execute(
                select(DesignatedWinner)
                .where(DesignatedWinner.winner_type == winner_type)
                .where(DesignatedWinner.employee_category == category)
                .where(DesignatedWinner.period == period)
            )
            return result.scalar_one_or_none()

    async def list(self, year: Optional[int] = None) -> List[DesignatedWinner]:
        query = select(DesignatedWinner).order_by(DesignatedWinner.period.desc(), DesignatedWinner.id)
        if year is not None:
            query = query.where(DesignatedWinner.period.like(f"{year:04d}%"))
        async with store_guard(self.db, "winner list"):
            result = await self.db.execute(query)
            return list(result.scalars().all())

    async def recap(self, year: int) -> "WinnerRecap":
        return build_recap(await self.list(year), year)


@dataclass
class YearlyCandidate:
    employee_id: int
    employee_category: str
    monthly_win_count: int = 0
    total_points: int = 0
    months: List[str] = field(default_factory=list)

    @property
    def avg_points(self) -> int:
        if not self.monthly_win_count:
            return 0
        return round_half_away(Fraction(self.total_points, self.monthly_win_count))


@dataclass
class WinnerRecap:
    year: int
    monthly_winners: Dict[str, List] = field(default_factory=dict)
    yearly_candidates: Dict[str, List[YearlyCandidate]] = field(default_factory=dict)
    yearly_winners: Dict[str, Optional[object]] = field(default_factory=dict)


_MONTHLY_RE = re.compile(r"[0-9]{4}-[0-9]{2}")


def build_recap(winners: Sequence, year: int) -> WinnerRecap:
    """Group a year's designated winners and rank Employee of the Year candidates.

    Candidates are ordered by number of monthly wins, then total points.
    """
    prefix = f"{year:04d}"
    recap = WinnerRecap(year=year)
    for category in EMPLOYEE_CATEGORIES:
        recap.monthly_winners[category] = []
        recap.yearly_candidates[category] = []
        recap.yearly_winners[category] = None

    monthly = [
        w for w in winners
        if w.winner_type == WINNER_MONTHLY and w.period.startswith(prefix) and _MONTHLY_RE.fullmatch(w.period)
    ]
    monthly.sort(key=lambda w: w.period, reverse=True)

    candidates: Dict[tuple, YearlyCandidate] = {}
    for winner in monthly:
        recap.monthly_winners.setdefault(winner.employee_category, []).append(winner)
        key = (winner.employee_id, winner.employee_category)
        if key not in candidates:
            candidates[key] = YearlyCandidate(winner.employee_id, winner.employee_category)
        candidate = candidates[key]
        candidate.monthly_win_count += 1
        candidate.total_points += winner.final_points
        candidate.months.append(winner.period)

    ranked = sorted(candidates.values(), key=lambda c: (c.monthly_win_count, c.total_points), reverse=True)
    for candidate in ranked:
        recap.yearly_candidates.setdefault(candidate.employee_category, []).append(candidate)

    for winner in winners:
        if winner.winner_type == WINNER_YEARLY and winner.period == prefix:
            recap.yearly_winners[winner.employee_category] = winner
    return recap
