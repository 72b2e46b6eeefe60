# eom/models/winner.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, func
from eom.database import Base

WINNER_MONTHLY = "monthly"
WINNER_YEARLY = "yearly"
WINNER_TYPES = (WINNER_MONTHLY, WINNER_YEARLY)

class DesignatedWinner(Base):
    __tablename__ = "designated_winners"

    id = Column(Integer, primary_key=True, index=True)
    winner_type = Column(String, nullable=False)  # monthly, yearly
    employee_category = Column(String, nullable=False)  # ASN, Non ASN
    period = Column(String(7), nullable=False)  # YYYY-MM for monthly, YYYY for yearly
    employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    final_points = Column(Integer, nullable=False)
    designated_by = Column(Integer, ForeignKey("employees.id"), nullable=False)
    designated_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("winner_type", "employee_category", "period", name="uq_winner_type_category_period"),
    )
