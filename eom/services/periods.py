import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import List, Optional, Tuple

from sqlalchemy import select

from eom.core.errors import ValidationError
from eom.database import store_guard, upsert
from eom.models.period_settings import EomSettings

MONTH_NAMES = [
    "Januari", "Februari", "Maret", "April", "Mei", "Juni",
    "Juli", "Agustus", "September", "Oktober", "November", "Desember",
]

_PERIOD_RE = re.compile(r"([0-9]{4})-([0-9]{2})")
_YEAR_RE = re.compile(r"[0-9]{4}")

PHASE_NOT_STARTED = "not_started"
PHASE_ACTIVE = "active"
PHASE_COMPLETED = "completed"
PHASE_NO_SETTINGS = "no_settings"


def parse_period(period: str) -> Tuple[int, int]:
    """Split a ``YYYY-MM`` token into (year, month)."""
    match = _PERIOD_RE.fullmatch(period or "")
    if not match:
        raise ValidationError("period", f"Invalid period {period!r}, expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12:
        raise ValidationError("period", f"Invalid month in period {period!r}")
    return year, month


def parse_year(year: str) -> int:
    if not _YEAR_RE.fullmatch(year or ""):
        raise ValidationError("year", f"Invalid year {year!r}, expected YYYY")
    return int(year)


def format_period(period: str) -> str:
    """'2025-03' -> 'Maret 2025'"""
    year, month = parse_period(period)
    return f"{MONTH_NAMES[month - 1]} {year}"


def months_of_year(year: int) -> List[str]:
    return [f"{year:04d}-{month:02d}" for month in range(1, 13)]


def period_year(period: str) -> int:
    return parse_period(period)[0]


@dataclass(frozen=True)
class PeriodStatus:
    phase: str
    can_rate: bool
    can_evaluate: bool
    can_verify: bool
    message: str
    period: Optional[str] = None


def _format_date(value: date) -> str:
    return f"{value.day} {MONTH_NAMES[value.month - 1]} {value.year}"


def period_status(settings, now: datetime) -> PeriodStatus:
    """Work out which phase a rating period is in at ``now``.

    Rating, evaluation and verification all run concurrently inside the
    rating window; the window's end date is inclusive.
    """
    if settings is None:
        return PeriodStatus(
            phase=PHASE_NO_SETTINGS,
            can_rate=False,
            can_evaluate=False,
            can_verify=False,
            message="Tidak ada periode penilaian yang aktif saat ini.",
        )

    start = datetime.combine(settings.rating_start_date, time.min)
    end = datetime.combine(settings.rating_end_date, time.max)
    if now.tzinfo is not None:
        now = now.replace(tzinfo=None)

    if now < start:
        return PeriodStatus(
            phase=PHASE_NOT_STARTED,
            can_rate=False,
            can_evaluate=False,
            can_verify=False,
            message=f"Periode penilaian {settings.period} akan dimulai pada {_format_date(start.date())}",
            period=settings.period,
        )
    if now <= end:
        return PeriodStatus(
            phase=PHASE_ACTIVE,
            can_rate=True,
            can_evaluate=True,
            can_verify=True,
            message=f"Periode penilaian {settings.period} aktif sampai {_format_date(end.date())}",
            period=settings.period,
        )
    return PeriodStatus(
        phase=PHASE_COMPLETED,
        can_rate=False,
        can_evaluate=False,
        can_verify=False,
        message=f"Periode {settings.period} sudah selesai.",
        period=settings.period,
    )


async def get_settings(db, period: str):
    parse_period(period)
    async with store_guard(db, "period settings read"):
        result = await db.execute(select(EomSettings).where(EomSettings.period == period))
        return result.scalar_one_or_none()


async def save_settings(db, period: str, actor_id: int, windows: dict):
    """Create or replace the rating/evaluation/verification windows for a period."""
    parse_period(period)
    for phase in ("rating", "evaluation", "verification"):
        if windows[f"{phase}_end_date"] < windows[f"{phase}_start_date"]:
            raise ValidationError(f"{phase}_end_date", f"The {phase} window ends before it starts")

    values = dict(windows, period=period, created_by=actor_id, updated_at=datetime.now(timezone.utc))
    return await upsert(db, EomSettings, values, key=("period",), preserve=("created_by",))
