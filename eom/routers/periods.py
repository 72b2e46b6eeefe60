from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from eom.database import get_db
from eom.core.auth import get_current_user, get_current_admin
from eom.schemas.period import (
    PeriodSettingsIn, PeriodSettingsResponse, PeriodStatusResponse,
    ParticipatingUnitIn, ParticipatingUnitResponse, UnitCompletionResponse
)
from eom.services import participation
from eom.services.periods import format_period, get_settings, period_status, save_settings

router = APIRouter(prefix="/periods", tags=["periods"])

@router.get("/units", response_model=List[ParticipatingUnitResponse])
async def list_participating_units(
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    return await participation.list_units(db)

@router.put("/units/{work_unit_id}", response_model=ParticipatingUnitResponse)
async def update_unit_participation(
    work_unit_id: int,
    unit_in: ParticipatingUnitIn,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    return await participation.set_unit_participation(db, work_unit_id, unit_in.is_active)

@router.get("/{period}/status", response_model=PeriodStatusResponse)
async def get_period_status(
    period: str,
    work_unit_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    settings = await get_settings(db, period)
    status = period_status(settings, datetime.now())
    unit_participating = None
    if work_unit_id is not None:
        unit_participating = await participation.is_unit_participating(db, work_unit_id)
    return PeriodStatusResponse(
        period=period,
        period_label=format_period(period),
        phase=status.phase,
        can_rate=status.can_rate,
        can_evaluate=status.can_evaluate,
        can_verify=status.can_verify,
        message=status.message,
        unit_participating=unit_participating
    )

@router.get("/{period}/completion", response_model=List[UnitCompletionResponse])
async def get_rating_completion(
    period: str,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    units = await participation.rating_completion(db, period)
    return [UnitCompletionResponse.model_validate(unit) for unit in units]

@router.put("/{period}", response_model=PeriodSettingsResponse)
async def update_period_settings(
    period: str,
    settings_in: PeriodSettingsIn,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    return await save_settings(db, period, admin.id, settings_in.model_dump())
