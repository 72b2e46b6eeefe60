from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Optional, Sequence

from eom.services.rounding import round_half_away


class SourceTier(str, Enum):
    FINAL = "final"
    UNIT = "unit"
    PEER_AVERAGE = "peerAverage"


@dataclass(frozen=True)
class ResolvedScore:
    subject_id: int
    period: str
    score: int
    source_tier: SourceTier


def peer_average(peer_ratings: Sequence) -> Optional[int]:
    if not peer_ratings:
        return None
    total = sum(r.total_points or 0 for r in peer_ratings)
    return round_half_away(Fraction(total, len(peer_ratings)))


def resolve(subject_id, period: str, peer_ratings: Sequence, unit_eval=None, final_eval=None) -> Optional[ResolvedScore]:
    """Pick the authoritative score for a subject in one period.

    A central (final) evaluation wins over a unit evaluation, which wins
    over the rounded mean of the peer ratings. Tiers are never blended.
    Returns None when nothing has been submitted, which keeps the subject
    off the leaderboard.
    """
    if final_eval is not None:
        return ResolvedScore(subject_id, period, final_eval.final_total_points, SourceTier.FINAL)
    if unit_eval is not None:
        return ResolvedScore(subject_id, period, unit_eval.final_total_points, SourceTier.UNIT)

    average = peer_average(peer_ratings)
    if average is None:
        return None
    return ResolvedScore(subject_id, period, average, SourceTier.PEER_AVERAGE)
