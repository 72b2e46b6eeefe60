from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from eom.database import get_db
from eom.core.auth import get_current_user, get_current_admin
from eom.schemas.winner import DesignateWinnerRequest, DesignatedWinnerResponse, WinnerRecapResponse
from eom.services.periods import parse_year
from eom.services.winners import WinnerRegistry

router = APIRouter(prefix="/winners", tags=["winners"])

@router.get("", response_model=List[DesignatedWinnerResponse])
async def list_winners(
    year: Optional[str] = Query(None, description="YYYY"),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    return await WinnerRegistry(db).list(parse_year(year) if year else None)

@router.get("/recap", response_model=WinnerRecapResponse)
async def get_winner_recap(
    year: str = Query(..., description="YYYY"),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    recap = await WinnerRegistry(db).recap(parse_year(year))
    return WinnerRecapResponse.model_validate(recap, from_attributes=True)

@router.post("", response_model=DesignatedWinnerResponse)
async def designate_winner(
    winner_in: DesignateWinnerRequest,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    return await WinnerRegistry(db).designate(
        winner_in.winner_type,
        winner_in.employee_category,
        winner_in.period,
        winner_in.employee_id,
        winner_in.final_points,
        admin.id
    )

@router.delete("/{winner_id}")
async def revoke_winner(
    winner_id: int,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    await WinnerRegistry(db).revoke(winner_id)
    return {"message": "Designated winner removed"}
