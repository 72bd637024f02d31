"""Tests for evidence scoring.

All recency-dependent tests pin the clock; nothing here depends on the
date the suite runs.
"""

from datetime import UTC, date, datetime

import pytest

from trialmatchrx.models.schema import EvidenceInput
from trialmatchrx.scoring.clock import FixedClock
from trialmatchrx.scoring.evidence import (
    PRELIMINARY_REASON,
    biomarker_factor,
    enrollment_factor,
    recency_factor,
    score_evidence,
)

CLOCK = FixedClock(date(2026, 1, 15))


def _score(**kwargs):
    return score_evidence(EvidenceInput(**kwargs), clock=CLOCK)


# --- Full scenarios ---


def test_strong_phase3_trial_clamps_to_100():
    out = _score(
        phase="Phase 3",
        randomized=True,
        primary_endpoint="OS",
        met_primary=True,
        has_results=True,
        biomarker_hits=["EGFR", "ALK"],
        total_enrollment=900,
        last_update_date_iso="2026-01-05",
    )
    assert out.breakdown.cap == 55 + 12 + 18 + 20 + 8 + 10 + 10 + 5
    assert out.breakdown.cap == 138
    assert out.score == 100
    assert PRELIMINARY_REASON not in out.reasons
    assert out.reasons == [
        "Phase III — confirmatory efficacy evidence.",
        "Randomized design — reduces bias (+12).",
        "Primary endpoint: Overall Survival (OS).",
        "Primary endpoint met / significant benefit (+20).",
        "Results publicly posted (+8).",
        "Biomarker alignment: EGFR, ALK.",
        "Enrollment size ~900 participants.",
        "Recent activity (10 days ago).",
    ]


def test_phase1_only_is_preliminary():
    out = _score(phase="Phase 1")
    assert out.score == 15
    assert out.reasons == [
        "Phase I — preliminary safety/PK evidence.",
        "Overall evidence remains preliminary/limited.",
    ]


def test_empty_input_scores_unspecified_phase_only():
    out = score_evidence(EvidenceInput(), clock=CLOCK)
    assert out.score == 10
    assert out.breakdown.phase == 10
    assert out.breakdown.cap == 10
    assert out.reasons == [
        "Unspecified phase — treated as limited evidence.",
        PRELIMINARY_REASON,
    ]


def test_disclaimer_not_added_at_threshold():
    # 15 (phase 1) + 12 (randomized) + 4 (other endpoint) = 31
    out = _score(phase="Phase 1", randomized=True, primary_endpoint="Safety")
    assert out.score == 31
    assert PRELIMINARY_REASON not in out.reasons


def test_disclaimer_is_last_reason():
    out = _score(phase="Phase 1", total_enrollment=60)
    assert out.score == 17
    assert out.reasons[-1] == PRELIMINARY_REASON


# --- Phase ---


@pytest.mark.parametrize(
    ("phase", "points"),
    [
        ("Phase 3", 55),
        ("PHASE 4", 45),
        ("phase 2", 35),
        ("Phase 1", 15),
        ("Not Applicable", 10),
        ("N/A", 10),
        ("", 10),
        (None, 10),
        ("Early Phase", 10),
    ],
)
def test_phase_points(phase, points):
    assert _score(phase=phase).breakdown.phase == points


def test_phase_monotonic_by_tier():
    p3 = _score(phase="Phase 3").score
    p4 = _score(phase="Phase 4").score
    p2 = _score(phase="Phase 2").score
    p1 = _score(phase="Phase 1").score
    assert p3 > p4 > p2 > p1


def test_combined_phase_takes_phase3():
    out = _score(phase="Phase 2/Phase 3")
    assert out.breakdown.phase == 55
    assert out.reasons[0].startswith("Phase III")


def test_not_applicable_reason():
    out = _score(phase="Not Applicable")
    assert out.reasons[0] == "Not applicable phase — limited evidence tier."


# --- Endpoint ---


@pytest.mark.parametrize(
    ("endpoint", "points"),
    [("OS", 18), (" pfs ", 12), ("orr", 6), ("", 0), (None, 0), ("Quality of life", 4)],
)
def test_endpoint_points(endpoint, points):
    assert _score(primary_endpoint=endpoint).breakdown.endpoint == points


def test_other_endpoint_reason_is_uppercased():
    out = _score(primary_endpoint="dfs")
    assert "Primary endpoint: DFS." in out.reasons


def test_empty_endpoint_has_no_reason():
    out = _score(primary_endpoint="   ")
    assert not any(r.startswith("Primary endpoint") for r in out.reasons)


# --- Biomarkers ---


def test_biomarker_points_increase_then_cap():
    points = [biomarker_factor(["M"] * n).points for n in range(5)]
    assert points == [0, 5, 10, 15, 15]


def test_four_hits_equal_three_hits():
    three = _score(biomarker_hits=["EGFR", "ALK", "ROS1"])
    four = _score(biomarker_hits=["EGFR", "ALK", "ROS1", "KRAS"])
    assert three.breakdown.biomarkers == four.breakdown.biomarkers == 15


def test_biomarker_reason_uppercases_labels():
    assert biomarker_factor(["egfr", "Alk"]).note == "Biomarker alignment: EGFR, ALK."


# --- Enrollment ---


@pytest.mark.parametrize(
    ("n", "points"),
    [(None, 0), (0, 0), (10, 0), (50, 2), (99, 2), (100, 4), (200, 6), (400, 8), (799, 8), (800, 10)],
)
def test_enrollment_tiers(n, points):
    assert enrollment_factor(n).points == points


def test_small_enrollment_still_gets_reason():
    assert enrollment_factor(10).note == "Enrollment size ~10 participants."


def test_negative_enrollment_is_treated_as_absent():
    out = _score(total_enrollment=-5)
    assert out.breakdown.enrollment == 0
    assert not any("Enrollment" in r for r in out.reasons)


def test_non_numeric_enrollment_is_treated_as_absent():
    out = score_evidence(EvidenceInput.model_validate({"totalEnrollment": "lots"}), clock=CLOCK)
    assert out.breakdown.enrollment == 0


# --- Recency ---


def test_recency_uses_later_date():
    factor = recency_factor("2026-01-10", "2020-01-01", CLOCK)
    assert factor.points == 5
    assert factor.note == "Recent activity (5 days ago)."


def test_recency_falls_back_to_first_posted():
    assert recency_factor("2026-01-15", None, CLOCK).points == 5


def test_recency_decays_over_a_year():
    # 200 days: (1 - 200/365) * 5 = 2.26 -> 2
    assert recency_factor(None, "2025-06-29", CLOCK).points == 2


def test_recency_zero_after_a_year():
    factor = recency_factor(None, "2024-12-01", CLOCK)
    assert factor.points == 0
    assert factor.note is None


def test_invalid_dates_give_zero():
    assert recency_factor("not-a-date", "", CLOCK).points == 0


def test_future_date_counts_as_today():
    factor = recency_factor(None, "2026-03-01", CLOCK)
    assert factor.points == 5
    assert factor.note == "Recent activity (0 days ago)."


def test_datetime_with_timezone_is_accepted():
    assert recency_factor(None, "2026-01-14T23:30:00Z", CLOCK).points == 5


def test_same_day_calls_are_identical():
    kwargs = {"phase": "Phase 2", "last_update_date_iso": "2025-10-01"}
    morning = score_evidence(EvidenceInput(**kwargs), clock=FixedClock(date(2026, 1, 15)))
    evening = score_evidence(
        EvidenceInput(**kwargs), clock=FixedClock(datetime(2026, 1, 15, 23, 59, tzinfo=UTC))
    )
    assert morning.model_dump_json() == evening.model_dump_json()


# --- Range ---


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"phase": "Phase 3", "randomized": True, "met_primary": True, "has_results": True},
        {"biomarker_hits": ["A"] * 20, "total_enrollment": 10**9},
    ],
)
def test_score_in_range(kwargs):
    out = _score(**kwargs)
    assert 0 <= out.score <= 100


def test_month_precision_date_scores_recency():
    # 2025-12-01 -> 45 days before the clock: (1 - 45/365) * 5 = 4.38 -> 4
    factor = recency_factor(None, "2025-12", CLOCK)
    assert factor.points == 4
    assert factor.note == "Recent activity (45 days ago)."
