"""Penalty and bonus rules shared by the unit and central evaluation tiers.

Every magnitude is derived from the peer base score alone. The central tier
re-derives from that same base rather than from the unit tier's adjusted
score, so a penalty is never applied twice across tiers.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from eom.core.errors import ValidationError
from eom.services.rounding import round_half_away

DISCIPLINARY_RATE = Decimal("0.15")
ATTENDANCE_RATE = Decimal("0.05")
PERFORMANCE_RATE = Decimal("0.05")
CONTRIBUTION_RATE = Decimal("0.10")


@dataclass(frozen=True)
class EvaluationFlags:
    disciplinary: bool = False
    attendance: bool = False
    performance: bool = False
    contribution: bool = False

    @classmethod
    def from_record(cls, record) -> "EvaluationFlags":
        return cls(
            disciplinary=bool(record.has_disciplinary_action),
            attendance=bool(record.has_poor_attendance),
            performance=bool(record.has_poor_performance),
            contribution=bool(record.has_contribution),
        )


@dataclass(frozen=True)
class OverrideResult:
    base_score: int
    disciplinary_penalty: int
    attendance_penalty: int
    performance_penalty: int
    contribution_bonus: int
    adjustment: int
    final_score: int

    @property
    def total_penalty(self) -> int:
        return self.disciplinary_penalty + self.attendance_penalty + self.performance_penalty

    @property
    def total_bonus(self) -> int:
        return self.contribution_bonus

    @property
    def penalties(self) -> dict:
        return {
            "disciplinary": self.disciplinary_penalty,
            "attendance": self.attendance_penalty,
            "performance": self.performance_penalty,
        }

    @property
    def bonuses(self) -> dict:
        return {"contribution": self.contribution_bonus}


def _portion(base_score: int, rate: Decimal, flagged: bool) -> int:
    if not flagged:
        return 0
    return round_half_away(Decimal(base_score) * rate)


def compute(base_score: int, flags: EvaluationFlags, adjustment: int = 0) -> OverrideResult:
    """Apply the flagged penalties, the contribution bonus and any adjustment."""
    disciplinary = _portion(base_score, DISCIPLINARY_RATE, flags.disciplinary)
    attendance = _portion(base_score, ATTENDANCE_RATE, flags.attendance)
    performance = _portion(base_score, PERFORMANCE_RATE, flags.performance)
    contribution = _portion(base_score, CONTRIBUTION_RATE, flags.contribution)
    adjustment = adjustment or 0

    final_score = base_score - (disciplinary + attendance + performance) + contribution + adjustment
    return OverrideResult(
        base_score=base_score,
        disciplinary_penalty=disciplinary,
        attendance_penalty=attendance,
        performance_penalty=performance,
        contribution_bonus=contribution,
        adjustment=adjustment,
        final_score=final_score,
    )


def _blank(text: Optional[str]) -> bool:
    return not (text or "").strip()


def validate(
    flags: EvaluationFlags,
    disciplinary_note: Optional[str] = None,
    contribution_description: Optional[str] = None,
    adjustment: int = 0,
    adjustment_note: Optional[str] = None,
) -> None:
    """Reject an evaluation whose flags are missing their required text."""
    if flags.disciplinary and _blank(disciplinary_note):
        raise ValidationError(
            "disciplinary_action_note", "A note is required when a disciplinary action is flagged"
        )
    if flags.contribution and _blank(contribution_description):
        raise ValidationError(
            "contribution_description", "A description is required when a contribution is flagged"
        )
    if adjustment and _blank(adjustment_note):
        raise ValidationError(
            "additional_adjustment_note", "A note is required for a non-zero additional adjustment"
        )


# Per flag: (flag attribute, note attribute, evidence link attribute)
FLAG_FIELDS = (
    ("has_disciplinary_action", "disciplinary_action_note", "disciplinary_evidence_link"),
    ("has_poor_attendance", "attendance_note", "attendance_evidence_link"),
    ("has_poor_performance", "performance_note", "performance_evidence_link"),
    ("has_contribution", "contribution_description", "contribution_evidence_link"),
)

VERIFIED_FIELDS = (
    "disciplinary_verified",
    "attendance_verified",
    "performance_verified",
    "contribution_verified",
)


@dataclass
class FinalEvaluationDefaults:
    """Initial values for the central evaluation form."""

    source: str = "blank"  # blank, unit, final
    values: dict = field(default_factory=dict)


def _blank_values() -> dict:
    values = {}
    for flag, note, link in FLAG_FIELDS:
        values[flag] = False
        values[note] = ""
        values[link] = ""
    for verified in VERIFIED_FIELDS:
        values[verified] = False
    values["additional_adjustment"] = 0
    values["additional_adjustment_note"] = ""
    return values


def prefill_from_unit(unit_eval=None, final_eval=None) -> FinalEvaluationDefaults:
    """Defaults for the central tier's form.

    An existing central evaluation is shown as stored. Otherwise the unit
    tier's flags, notes and links are copied with no adjustment and nothing
    verified. With neither, the form starts blank.
    """
    values = _blank_values()
    if final_eval is not None:
        for flag, note, link in FLAG_FIELDS:
            values[flag] = bool(getattr(final_eval, flag))
            values[note] = getattr(final_eval, note) or ""
            values[link] = getattr(final_eval, link) or ""
        for verified in VERIFIED_FIELDS:
            values[verified] = bool(getattr(final_eval, verified))
        values["additional_adjustment"] = final_eval.additional_adjustment or 0
        values["additional_adjustment_note"] = final_eval.additional_adjustment_note or ""
        return FinalEvaluationDefaults(source="final", values=values)

    if unit_eval is not None:
        for flag, note, link in FLAG_FIELDS:
            values[flag] = bool(getattr(unit_eval, flag))
            values[note] = getattr(unit_eval, note) or ""
            values[link] = getattr(unit_eval, link) or ""
        return FinalEvaluationDefaults(source="unit", values=values)

    return FinalEvaluationDefaults(values=values)
