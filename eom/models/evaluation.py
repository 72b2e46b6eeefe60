# eom/models/evaluation.py
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey, UniqueConstraint, func
from eom.database import Base

class UnitEvaluation(Base):
    __tablename__ = "unit_evaluations"

    id = Column(Integer, primary_key=True, index=True)
    rated_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    rating_period = Column(String(7), nullable=False)
    evaluator_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    work_unit_id = Column(Integer, nullable=True)

    # Sum of the period's peer ratings
    original_total_points = Column(Integer, nullable=False)

    has_disciplinary_action = Column(Boolean, nullable=False, default=False)
    disciplinary_action_note = Column(Text, nullable=True)
    disciplinary_evidence_link = Column(String, nullable=True)
    disciplinary_penalty = Column(Integer, nullable=False, default=0)

    has_poor_attendance = Column(Boolean, nullable=False, default=False)
    attendance_note = Column(Text, nullable=True)
    attendance_evidence_link = Column(String, nullable=True)
    attendance_penalty = Column(Integer, nullable=False, default=0)

    has_poor_performance = Column(Boolean, nullable=False, default=False)
    performance_note = Column(Text, nullable=True)
    performance_evidence_link = Column(String, nullable=True)
    performance_penalty = Column(Integer, nullable=False, default=0)

    has_contribution = Column(Boolean, nullable=False, default=False)
    contribution_description = Column(Text, nullable=True)
    contribution_evidence_link = Column(String, nullable=True)
    contribution_bonus = Column(Integer, nullable=False, default=0)

    final_total_points = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("rated_employee_id", "rating_period", name="uq_unit_eval_employee_period"),
    )

class FinalEvaluation(Base):
    __tablename__ = "final_evaluations"

    id = Column(Integer, primary_key=True, index=True)
    rated_employee_id = Column(Integer, ForeignKey("employees.id"), nullable=False)
    rating_period = Column(String(7), nullable=False)
    evaluator_id = Column(Integer, ForeignKey("employees.id"), nullable=False)

    # Peer sum; never the unit tier's adjusted score
    peer_total_points = Column(Integer, nullable=False)
    unit_evaluation_id = Column(Integer, ForeignKey("unit_evaluations.id", ondelete="SET NULL"), nullable=True)
    unit_final_points = Column(Integer, nullable=True)

    has_disciplinary_action = Column(Boolean, nullable=False, default=False)
    disciplinary_action_note = Column(Text, nullable=True)
    disciplinary_evidence_link = Column(String, nullable=True)
    disciplinary_penalty = Column(Integer, nullable=False, default=0)
    disciplinary_verified = Column(Boolean, nullable=False, default=False)
    disciplinary_verified_at = Column(DateTime(timezone=True), nullable=True)

    has_poor_attendance = Column(Boolean, nullable=False, default=False)
    attendance_note = Column(Text, nullable=True)
    attendance_evidence_link = Column(String, nullable=True)
    attendance_penalty = Column(Integer, nullable=False, default=0)
    attendance_verified = Column(Boolean, nullable=False, default=False)
    attendance_verified_at = Column(DateTime(timezone=True), nullable=True)

    has_poor_performance = Column(Boolean, nullable=False, default=False)
    performance_note = Column(Text, nullable=True)
    performance_evidence_link = Column(String, nullable=True)
    performance_penalty = Column(Integer, nullable=False, default=0)
    performance_verified = Column(Boolean, nullable=False, default=False)
    performance_verified_at = Column(DateTime(timezone=True), nullable=True)

    has_contribution = Column(Boolean, nullable=False, default=False)
    contribution_description = Column(Text, nullable=True)
    contribution_evidence_link = Column(String, nullable=True)
    contribution_bonus = Column(Integer, nullable=False, default=0)
    contribution_verified = Column(Boolean, nullable=False, default=False)
    contribution_verified_at = Column(DateTime(timezone=True), nullable=True)

    additional_adjustment = Column(Integer, nullable=False, default=0)
    additional_adjustment_note = Column(Text, nullable=True)

    final_total_points = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        UniqueConstraint("rated_employee_id", "rating_period", name="uq_final_eval_employee_period"),
    )
