# eom/models/participation.py
from sqlalchemy import Column, Integer, Boolean, DateTime, func
from eom.database import Base

class ParticipatingUnit(Base):
    __tablename__ = "eom_participating_units"

    id = Column(Integer, primary_key=True, index=True)
    work_unit_id = Column(Integer, unique=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())
