from pydantic import BaseModel
from datetime import date, datetime
from typing import List, Optional

class PeriodSettingsIn(BaseModel):
    rating_start_date: date
    rating_end_date: date
    evaluation_start_date: date
    evaluation_end_date: date
    verification_start_date: date
    verification_end_date: date

class PeriodSettingsResponse(PeriodSettingsIn):
    id: int
    period: str
    created_by: int
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class PeriodStatusResponse(BaseModel):
    period: str
    period_label: str
    phase: str  # not_started, active, completed, no_settings
    can_rate: bool
    can_evaluate: bool
    can_verify: bool
    message: str
    unit_participating: Optional[bool] = None

class ParticipatingUnitIn(BaseModel):
    is_active: bool

class ParticipatingUnitResponse(BaseModel):
    id: int
    work_unit_id: int
    is_active: bool
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}

class RaterStatusResponse(BaseModel):
    employee_id: int
    name: Optional[str]
    employee_category: str
    has_rated: bool
    rated_asn: bool
    rated_non_asn: bool

    model_config = {"from_attributes": True}

class UnitCompletionResponse(BaseModel):
    work_unit_id: int
    total_employees: int
    rated_count: int
    completion_percentage: int
    employees: List[RaterStatusResponse]

    model_config = {"from_attributes": True}
