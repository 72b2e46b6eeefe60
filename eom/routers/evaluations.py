from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from eom.database import get_db
from eom.core.auth import get_current_user, get_current_evaluator, get_current_admin
from eom.schemas.evaluation import (
    UnitEvaluationCreate, FinalEvaluationCreate, UnitEvaluationResponse,
    FinalEvaluationResponse, EvaluationDetailResponse, FinalPrefillResponse
)
from eom.services import evaluations

router = APIRouter(prefix="/evaluations", tags=["evaluations"])

@router.post("/unit", response_model=UnitEvaluationResponse)
async def submit_unit_evaluation(
    evaluation_in: UnitEvaluationCreate,
    db: AsyncSession = Depends(get_db),
    evaluator = Depends(get_current_evaluator)
):
    return await evaluations.submit_unit_evaluation(db, evaluator, evaluation_in)

@router.post("/final", response_model=FinalEvaluationResponse)
async def submit_final_evaluation(
    evaluation_in: FinalEvaluationCreate,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    return await evaluations.submit_final_evaluation(db, admin, evaluation_in)

@router.get("/final/prefill/{subject_id}/{period}", response_model=FinalPrefillResponse)
async def get_final_prefill(
    subject_id: int,
    period: str,
    db: AsyncSession = Depends(get_db),
    admin = Depends(get_current_admin)
):
    return await evaluations.final_prefill(db, subject_id, period)

@router.get("/{subject_id}/{period}", response_model=EvaluationDetailResponse)
async def get_evaluation_detail(
    subject_id: int,
    period: str,
    db: AsyncSession = Depends(get_db),
    current_user = Depends(get_current_user)
):
    detail = await evaluations.evaluation_detail(db, subject_id, period)
    unit_eval = detail["unit_evaluation"]
    final_eval = detail["final_evaluation"]
    detail["unit_evaluation"] = UnitEvaluationResponse.model_validate(unit_eval) if unit_eval else None
    detail["final_evaluation"] = FinalEvaluationResponse.model_validate(final_eval) if final_eval else None
    return EvaluationDetailResponse(**detail)
