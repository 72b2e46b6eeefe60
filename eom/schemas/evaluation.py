from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, List, Optional

class UnitEvaluationCreate(BaseModel):
    rated_employee_id: int
    rating_period: str  # YYYY-MM

    has_disciplinary_action: bool = False
    disciplinary_action_note: Optional[str] = None
    disciplinary_evidence_link: Optional[str] = None

    has_poor_attendance: bool = False
    attendance_note: Optional[str] = None
    attendance_evidence_link: Optional[str] = None

    has_poor_performance: bool = False
    performance_note: Optional[str] = None
    performance_evidence_link: Optional[str] = None

    has_contribution: bool = False
    contribution_description: Optional[str] = None
    contribution_evidence_link: Optional[str] = None

class FinalEvaluationCreate(UnitEvaluationCreate):
    # Audit markers only; they never change the score
    disciplinary_verified: bool = False
    attendance_verified: bool = False
    performance_verified: bool = False
    contribution_verified: bool = False

    additional_adjustment: int = 0
    additional_adjustment_note: Optional[str] = None

class UnitEvaluationResponse(UnitEvaluationCreate):
    id: int
    evaluator_id: int
    work_unit_id: Optional[int]
    original_total_points: int
    disciplinary_penalty: int
    attendance_penalty: int
    performance_penalty: int
    contribution_bonus: int
    final_total_points: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class FinalEvaluationResponse(FinalEvaluationCreate):
    id: int
    evaluator_id: int
    peer_total_points: int
    unit_evaluation_id: Optional[int]
    unit_final_points: Optional[int]
    disciplinary_penalty: int
    attendance_penalty: int
    performance_penalty: int
    contribution_bonus: int
    disciplinary_verified_at: Optional[datetime] = None
    attendance_verified_at: Optional[datetime] = None
    performance_verified_at: Optional[datetime] = None
    contribution_verified_at: Optional[datetime] = None
    final_total_points: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class ResolvedScoreResponse(BaseModel):
    subject_id: int
    period: str
    score: int
    source_tier: str  # final, unit, peerAverage

class CriterionBreakdown(BaseModel):
    criterion: str
    average_points: float
    max_points: int
    average_percentage: int

class PeerRatingSummary(BaseModel):
    rating_count: int
    total_points: int
    average_points: Optional[int]
    criteria: List[CriterionBreakdown] = []

class EvaluationDetailResponse(BaseModel):
    subject_id: int
    period: str
    period_label: str
    peer: PeerRatingSummary
    unit_evaluation: Optional[UnitEvaluationResponse] = None
    final_evaluation: Optional[FinalEvaluationResponse] = None
    resolved: Optional[ResolvedScoreResponse] = None

class OverridePreview(BaseModel):
    disciplinary_penalty: int
    attendance_penalty: int
    performance_penalty: int
    contribution_bonus: int
    additional_adjustment: int
    final_total_points: int

class FinalPrefillResponse(BaseModel):
    subject_id: int
    period: str
    source: str  # blank, unit, final
    peer_total_points: int
    unit_final_points: Optional[int]
    values: Dict[str, object]
    preview: OverridePreview
