import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eom.core.errors import ForbiddenError, NotFoundError, ValidationError
from eom.database import store_guard, upsert
from eom.models.employee import ROLE_UNIT_ADMIN, Employee
from eom.models.evaluation import FinalEvaluation, UnitEvaluation
from eom.models.rating import PeerRating
from eom.schemas.evaluation import FinalEvaluationCreate, UnitEvaluationCreate
from eom.services import override
from eom.services.override import EvaluationFlags
from eom.services.periods import format_period, parse_period
from eom.services.resolver import peer_average, resolve

logger = logging.getLogger(__name__)

EVALUATION_KEY = ("rated_employee_id", "rating_period")

# Used when a criterion's maximum is unknown to the engine
DEFAULT_CRITERION_MAX = 25


def _text(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


async def get_subject(db: AsyncSession, subject_id: int) -> Employee:
    async with store_guard(db, "employee lookup"):
        subject = await db.get(Employee, subject_id)
    if subject is None:
        raise NotFoundError(f"Employee {subject_id} not found")
    return subject


async def get_peer_ratings(db: AsyncSession, subject_id: int, period: str) -> List[PeerRating]:
    async with store_guard(db, "peer rating read"):
        result = await db.execute(
            select(PeerRating)
            .where(PeerRating.rated_employee_id == subject_id)
            .where(PeerRating.rating_period == period)
            .order_by(PeerRating.id)
        )
        return list(result.scalars().all())


async def get_unit_evaluation(db: AsyncSession, subject_id: int, period: str) -> Optional[UnitEvaluation]:
    async with store_guard(db, "unit evaluation read"):
        result = await db.execute(
            select(UnitEvaluation)
            .where(UnitEvaluation.rated_employee_id == subject_id)
            .where(UnitEvaluation.rating_period == period)
        )
        return result.scalar_one_or_none()


async def get_final_evaluation(db: AsyncSession, subject_id: int, period: str) -> Optional[FinalEvaluation]:
    async with store_guard(db, "final evaluation read"):
        result = await db.execute(
            select(FinalEvaluation)
            .where(FinalEvaluation.rated_employee_id == subject_id)
            .where(FinalEvaluation.rating_period == period)
        )
        return result.scalar_one_or_none()


async def peer_base_score(db: AsyncSession, subject_id: int, period: str) -> int:
    """Sum of the period's peer ratings: the base every override works from.

    The no-override leaderboard fallback uses the mean instead; both are kept.
    """
    ratings = await get_peer_ratings(db, subject_id, period)
    if not ratings:
        raise ValidationError("base_score", f"Employee {subject_id} has no peer ratings for {period}")
    return sum(r.total_points or 0 for r in ratings)


def _flags(payload: UnitEvaluationCreate) -> EvaluationFlags:
    return EvaluationFlags(
        disciplinary=payload.has_disciplinary_action,
        attendance=payload.has_poor_attendance,
        performance=payload.has_poor_performance,
        contribution=payload.has_contribution,
    )


def _flag_values(payload: UnitEvaluationCreate, result: override.OverrideResult) -> dict:
    return {
        "has_disciplinary_action": payload.has_disciplinary_action,
        "disciplinary_action_note": _text(payload.disciplinary_action_note),
        "disciplinary_evidence_link": _text(payload.disciplinary_evidence_link),
        "disciplinary_penalty": result.disciplinary_penalty,
        "has_poor_attendance": payload.has_poor_attendance,
        "attendance_note": _text(payload.attendance_note),
        "attendance_evidence_link": _text(payload.attendance_evidence_link),
        "attendance_penalty": result.attendance_penalty,
        "has_poor_performance": payload.has_poor_performance,
        "performance_note": _text(payload.performance_note),
        "performance_evidence_link": _text(payload.performance_evidence_link),
        "performance_penalty": result.performance_penalty,
        "has_contribution": payload.has_contribution,
        "contribution_description": _text(payload.contribution_description),
        "contribution_evidence_link": _text(payload.contribution_evidence_link),
        "contribution_bonus": result.contribution_bonus,
        "final_total_points": result.final_score,
    }


async def submit_unit_evaluation(db: AsyncSession, evaluator: Employee, payload: UnitEvaluationCreate) -> UnitEvaluation:
    """Create or replace the unit supervisor's evaluation for (subject, period).

    A later submission fully replaces an earlier one.
    """
    period = payload.rating_period
    parse_period(period)
    flags = _flags(payload)
    override.validate(
        flags,
        disciplinary_note=payload.disciplinary_action_note,
        contribution_description=payload.contribution_description,
    )

    subject = await get_subject(db, payload.rated_employee_id)
    if evaluator.role == ROLE_UNIT_ADMIN and subject.work_unit_id != evaluator.work_unit_id:
        raise ForbiddenError(f"Employee {subject.id} is not in your work unit")

    base_score = await peer_base_score(db, subject.id, period)
    result = override.compute(base_score, flags)

    values = {
        "rated_employee_id": subject.id,
        "rating_period": period,
        "evaluator_id": evaluator.id,
        "work_unit_id": subject.work_unit_id,
        "original_total_points": base_score,
        "updated_at": datetime.now(timezone.utc),
    }
    values.update(_flag_values(payload, result))
    evaluation = await upsert(db, UnitEvaluation, values, key=EVALUATION_KEY)
    logger.info(
        "Unit evaluation for employee %s in %s by %s: %s -> %s",
        subject.id, period, evaluator.id, base_score, result.final_score,
    )
    return evaluation


async def submit_final_evaluation(db: AsyncSession, evaluator: Employee, payload: FinalEvaluationCreate) -> FinalEvaluation:
    """Create or replace the central evaluation for (subject, period).

    Penalties are re-derived from the peer base score, not from the unit
    tier's final points; the unit tier is only snapshotted for audit.
    """
    period = payload.rating_period
    parse_period(period)
    flags = _flags(payload)
    override.validate(
        flags,
        disciplinary_note=payload.disciplinary_action_note,
        contribution_description=payload.contribution_description,
        adjustment=payload.additional_adjustment,
        adjustment_note=payload.additional_adjustment_note,
    )

    subject = await get_subject(db, payload.rated_employee_id)
    base_score = await peer_base_score(db, subject.id, period)
    unit_eval = await get_unit_evaluation(db, subject.id, period)
    result = override.compute(base_score, flags, payload.additional_adjustment)

    now = datetime.now(timezone.utc)
    values = {
        "rated_employee_id": subject.id,
        "rating_period": period,
        "evaluator_id": evaluator.id,
        "peer_total_points": base_score,
        "unit_evaluation_id": unit_eval.id if unit_eval else None,
        "unit_final_points": unit_eval.final_total_points if unit_eval else None,
        "additional_adjustment": payload.additional_adjustment,
        "additional_adjustment_note": _text(payload.additional_adjustment_note),
        "updated_at": now,
    }
    values.update(_flag_values(payload, result))
    for verified in override.VERIFIED_FIELDS:
        marked = getattr(payload, verified)
        values[verified] = marked
        values[f"{verified}_at"] = now if marked else None

    evaluation = await upsert(db, FinalEvaluation, values, key=EVALUATION_KEY)
    logger.info(
        "Final evaluation for employee %s in %s by %s: %s -> %s (adjustment %+d)",
        subject.id, period, evaluator.id, base_score, result.final_score, payload.additional_adjustment,
    )
    return evaluation


async def final_prefill(db: AsyncSession, subject_id: int, period: str) -> dict:
    parse_period(period)
    await get_subject(db, subject_id)
    base_score = await peer_base_score(db, subject_id, period)
    unit_eval = await get_unit_evaluation(db, subject_id, period)
    final_eval = await get_final_evaluation(db, subject_id, period)

    defaults = override.prefill_from_unit(unit_eval, final_eval)
    values = defaults.values
    preview = override.compute(
        base_score,
        EvaluationFlags(
            disciplinary=values["has_disciplinary_action"],
            attendance=values["has_poor_attendance"],
            performance=values["has_poor_performance"],
            contribution=values["has_contribution"],
        ),
        values["additional_adjustment"],
    )
    return {
        "subject_id": subject_id,
        "period": period,
        "source": defaults.source,
        "peer_total_points": base_score,
        "unit_final_points": unit_eval.final_total_points if unit_eval else None,
        "values": values,
        "preview": {
            "disciplinary_penalty": preview.disciplinary_penalty,
            "attendance_penalty": preview.attendance_penalty,
            "performance_penalty": preview.performance_penalty,
            "contribution_bonus": preview.contribution_bonus,
            "additional_adjustment": preview.adjustment,
            "final_total_points": preview.final_score,
        },
    }


def criteria_breakdown(ratings, max_points: Optional[dict] = None) -> List[dict]:
    """Average each criterion's sub-score across the ratings that scored it."""
    max_points = max_points or {}
    totals = {}
    for rating in ratings:
        for criterion, points in (rating.criteria_totals or {}).items():
            total, count = totals.get(criterion, (0, 0))
            totals[criterion] = (total + points, count + 1)

    breakdown = []
    for criterion, (total, count) in totals.items():
        maximum = max_points.get(criterion, DEFAULT_CRITERION_MAX)
        average = total / count
        breakdown.append({
            "criterion": criterion,
            "average_points": round(average, 1),
            "max_points": maximum,
            "average_percentage": round(average / maximum * 100) if maximum else 0,
        })
    return breakdown


async def evaluation_detail(db: AsyncSession, subject_id: int, period: str) -> dict:
    """Every tier's data for one subject and period, plus the resolved score."""
    parse_period(period)
    await get_subject(db, subject_id)
    ratings = await get_peer_ratings(db, subject_id, period)
    unit_eval = await get_unit_evaluation(db, subject_id, period)
    final_eval = await get_final_evaluation(db, subject_id, period)
    resolved = resolve(subject_id, period, ratings, unit_eval, final_eval)

    return {
        "subject_id": subject_id,
        "period": period,
        "period_label": format_period(period),
        "peer": {
            "rating_count": len(ratings),
            "total_points": sum(r.total_points or 0 for r in ratings),
            "average_points": peer_average(ratings),
            "criteria": criteria_breakdown(ratings),
        },
        "unit_evaluation": unit_eval,
        "final_evaluation": final_eval,
        "resolved": {
            "subject_id": resolved.subject_id,
            "period": resolved.period,
            "score": resolved.score,
            "source_tier": resolved.source_tier.value,
        } if resolved else None,
    }
