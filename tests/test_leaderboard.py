"""Tests for monthly and yearly leaderboard aggregation."""

from types import SimpleNamespace

from eom.models.evaluation import UnitEvaluation
from eom.models.rating import PeerRating
from eom.services.leaderboard import (
    SubjectRecords,
    aggregate_monthly,
    aggregate_yearly,
    load_subjects,
    monthly_leaderboard,
    yearly_leaderboard,
)
from eom.services.resolver import SourceTier

# ─── Helpers ──────────────────────────────────────────────────────────────────


def _rating(period, points):
    return PeerRating(rating_period=period, total_points=points)


def _subject(subject_id, category="ASN", ratings=(), unit=None, final=None):
    return SubjectRecords(
        subject_id=subject_id,
        category=category,
        name=f"Employee {subject_id}",
        ratings=list(ratings),
        unit_evals=unit or {},
        final_evals=final or {},
    )


# ─── Pure aggregation ─────────────────────────────────────────────────────────


class TestMonthly:
    def test_sorted_descending_by_resolved_score(self):
        subjects = [
            _subject(1, ratings=[_rating("2025-01", 80), _rating("2025-01", 90)]),
            _subject(2, ratings=[_rating("2025-01", 120)]),
            _subject(3, ratings=[_rating("2025-01", 100)], unit={"2025-01": SimpleNamespace(final_total_points=70)}),
        ]
        entries = aggregate_monthly("2025-01", "ASN", subjects)
        assert [e.subject_id for e in entries] == [2, 1, 3]
        assert [e.rank for e in entries] == [1, 2, 3]
        assert entries[0].is_leader
        assert not entries[1].is_leader
        assert entries[1].score == 85
        assert entries[1].rating_count == 2
        assert entries[2].source_tier is SourceTier.UNIT

    def test_categories_never_compete(self):
        subjects = [
            _subject(1, "ASN", [_rating("2025-01", 50)]),
            _subject(2, "Non ASN", [_rating("2025-01", 500)]),
        ]
        assert [e.subject_id for e in aggregate_monthly("2025-01", "ASN", subjects)] == [1]
        assert [e.subject_id for e in aggregate_monthly("2025-01", "Non ASN", subjects)] == [2]

    def test_unrated_subjects_excluded(self):
        subjects = [
            _subject(1, ratings=[_rating("2025-02", 90)]),
            _subject(2, ratings=[_rating("2025-01", 60)]),
        ]
        assert [e.subject_id for e in aggregate_monthly("2025-01", "ASN", subjects)] == [2]

    def test_ties_keep_input_order(self):
        subjects = [
            _subject(5, ratings=[_rating("2025-01", 90)]),
            _subject(2, ratings=[_rating("2025-01", 90)]),
            _subject(9, ratings=[_rating("2025-01", 95)]),
        ]
        entries = aggregate_monthly("2025-01", "ASN", subjects)
        assert [e.subject_id for e in entries] == [9, 5, 2]

    def test_empty(self):
        assert aggregate_monthly("2025-01", "ASN", []) == []


class TestYearly:
    def test_sums_resolved_months_with_ratings(self):
        """Yearly score is the sum of resolved monthly scores over rated months."""
        ani = _subject(
            1,
            ratings=[
                _rating("2025-01", 80), _rating("2025-01", 90), _rating("2025-01", 100),
                _rating("2025-03", 100),
            ],
            unit={"2025-03": SimpleNamespace(final_total_points=120)},
        )
        budi = _subject(2, ratings=[_rating("2025-02", 150)])
        entries = aggregate_yearly(2025, "ASN", [ani, budi])
        assert [(e.subject_id, e.score) for e in entries] == [(1, 210), (2, 150)]
        assert entries[0].periods == ("2025-01", "2025-03")
        assert entries[0].rating_count == 4
        assert entries[1].periods == ("2025-02",)

    def test_override_without_ratings_is_ignored(self):
        """A month counts only when the subject has at least one peer rating in it."""
        subject = _subject(
            1,
            ratings=[_rating("2025-01", 90)],
            final={"2025-02": SimpleNamespace(final_total_points=500)},
        )
        assert aggregate_yearly(2025, "ASN", [subject])[0].score == 90

    def test_other_years_ignored(self):
        subject = _subject(1, ratings=[_rating("2024-12", 90), _rating("2025-01", 40)])
        entries = aggregate_yearly(2025, "ASN", [subject])
        assert entries[0].score == 40

    def test_single_month_subject_ranked_by_that_month(self):
        subject = _subject(1, ratings=[_rating("2025-06", 77)])
        entries = aggregate_yearly(2025, "ASN", [subject])
        assert entries[0].score == 77
        assert entries[0].source_tier is None


# ─── Store-backed loading ─────────────────────────────────────────────────────


class TestLoadSubjects:
    async def test_groups_rows_by_subject(self, db, people, rate):
        await rate(people["ani"], "2025-01", [80, 90])
        await rate(people["budi"], "2025-01", [100])
        await rate(people["citra"], "2025-01", [150])
        db.add(UnitEvaluation(
            rated_employee_id=people["budi"].id,
            rating_period="2025-01",
            evaluator_id=people["unit_admin"].id,
            original_total_points=100,
            final_total_points=95,
        ))
        await db.commit()

        subjects = await load_subjects(db, ["2025-01"], "ASN")
        by_id = {s.subject_id: s for s in subjects}
        assert people["citra"].id not in by_id
        assert len(by_id[people["ani"].id].ratings) == 2
        assert by_id[people["budi"].id].unit_evals["2025-01"].final_total_points == 95

    async def test_monthly_leaderboard(self, db, people, rate):
        await rate(people["ani"], "2025-01", [80, 90])
        await rate(people["budi"], "2025-01", [100])
        entries = await monthly_leaderboard(db, "2025-01", "ASN")
        assert [(e.subject_id, e.score) for e in entries] == [
            (people["budi"].id, 100),
            (people["ani"].id, 85),
        ]

    async def test_yearly_leaderboard(self, db, people, rate):
        await rate(people["ani"], "2025-01", [80])
        await rate(people["ani"], "2025-02", [70])
        await rate(people["budi"], "2025-01", [100])
        entries = await yearly_leaderboard(db, 2025, "ASN")
        assert [(e.subject_id, e.score) for e in entries] == [
            (people["ani"].id, 150),
            (people["budi"].id, 100),
        ]
