from pydantic import BaseModel, Field
from datetime import datetime
from typing import Dict, List, Optional

class DesignateWinnerRequest(BaseModel):
    winner_type: str = Field(..., pattern="^(monthly|yearly)$")
    employee_category: str
    period: str  # YYYY-MM for monthly, YYYY for yearly
    employee_id: int
    final_points: int

class DesignatedWinnerResponse(BaseModel):
    id: int
    winner_type: str
    employee_category: str
    period: str
    employee_id: int
    final_points: int
    designated_by: int
    designated_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class YearlyCandidateResponse(BaseModel):
    employee_id: int
    employee_category: str
    monthly_win_count: int
    total_points: int
    avg_points: int
    months: List[str]

    model_config = {"from_attributes": True}

class WinnerRecapResponse(BaseModel):
    year: int
    monthly_winners: Dict[str, List[DesignatedWinnerResponse]]
    yearly_candidates: Dict[str, List[YearlyCandidateResponse]]
    yearly_winners: Dict[str, Optional[DesignatedWinnerResponse]]

    model_config = {"from_attributes": True}
