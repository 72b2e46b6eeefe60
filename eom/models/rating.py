# eom/models/rating.py
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, JSON, func
from eom.database import Base

class PeerRating(Base):
    __tablename__ = "employee_ratings"

    id = Column(Integer, primary_key=True, index=True)
    rater_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    rated_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False, index=True)
    rating_period = Column(String(7), nullable=False, index=True)  # YYYY-MM
    detailed_ratings = Column(JSON, nullable=False, default=dict)
    criteria_totals = Column(JSON, nullable=False, default=dict)  # criterion -> sub-score
    total_points = Column(Integer, nullable=False, default=0)
    max_possible_points = Column(Integer, nullable=False, default=0)
    reason = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
