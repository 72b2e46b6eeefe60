# eom/models/period_settings.py
from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, func
from eom.database import Base

class EomSettings(Base):
    __tablename__ = "eom_settings"

    id = Column(Integer, primary_key=True, index=True)
    period = Column(String(7), unique=True, nullable=False)
    rating_start_date = Column(Date, nullable=False)
    rating_end_date = Column(Date, nullable=False)
    evaluation_start_date = Column(Date, nullable=False)
    evaluation_end_date = Column(Date, nullable=False)
    verification_start_date = Column(Date, nullable=False)
    verification_end_date = Column(Date, nullable=False)
    created_by = Column(Integer, ForeignKey("employees.id"), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())
