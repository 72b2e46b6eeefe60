from pydantic import BaseModel
from typing import List, Optional

class LeaderboardEntryResponse(BaseModel):
    rank: int
    subject_id: int
    name: Optional[str]
    score: int
    rating_count: int
    source_tier: Optional[str] = None
    periods: List[str]
    is_leader: bool

class LeaderboardResponse(BaseModel):
    view: str  # monthly, yearly
    period: str
    period_label: str
    category: str
    entries: List[LeaderboardEntryResponse]
