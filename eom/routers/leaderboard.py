from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from eom.database import get_db
from eom.core.auth import get_current_user
from eom.core.errors import ValidationError
from eom.models.employee import EMPLOYEE_CATEGORIES
from eom.schemas.leaderboard import LeaderboardResponse, LeaderboardEntryResponse
from eom.services.leaderboard import monthly_leaderboard, yearly_leaderboard
from eom.services.periods import format_period, parse_year

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])

def _check_category(category: str) -> str:
    if category not in EMPLOYEE_CATEGORIES:
        raise ValidationError("category", f"Unknown employee category {category!r}")
    return category

def _entry(entry) -> LeaderboardEntryResponse:
    return LeaderboardEntryResponse(
        rank=entry.rank,
        subject_id=entry.subject_id,
        name=entry.name,
        score=entry.score,
        rating_count=entry.rating_count,
        source_tier=entry.source_tier.value if entry.source_tier else None,
        periods=list(entry.periods),
        is_leader=entry.is_leader
    )

@router.get("/monthly", response_model=LeaderboardResponse)
async def get_monthly_leaderboard(
    period: str = Query(..., description="YYYY-MM"),
    category: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    _check_category(category)
    entries = await monthly_leaderboard(db, period, category)
    return LeaderboardResponse(
        view="monthly",
        period=period,
        period_label=format_period(period),
        category=category,
        entries=[_entry(e) for e in entries]
    )

@router.get("/yearly", response_model=LeaderboardResponse)
async def get_yearly_leaderboard(
    year: str = Query(..., description="YYYY"),
    category: str = Query(...),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    _check_category(category)
    entries = await yearly_leaderboard(db, parse_year(year), category)
    return LeaderboardResponse(
        view="yearly",
        period=year,
        period_label=year,
        category=category,
        entries=[_entry(e) for e in entries]
    )
