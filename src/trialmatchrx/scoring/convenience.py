"""Convenience: recruitment status, rough location and trial duration."""

from __future__ import annotations

from trialmatchrx.models.schema import CategoryScore, PatientProfile, TrialData
from trialmatchrx.scoring import weights
from trialmatchrx.scoring.classify import RecruitmentStatus, parse_status


_STATUS_NOTES = {
    RecruitmentStatus.RECRUITING: "Currently recruiting.",
    RecruitmentStatus.ACTIVE: "Active but not recruiting.",
}


def score_convenience(trial: TrialData, patient: PatientProfile) -> CategoryScore:
    score = 0
    reasons: list[str] = []

    status = parse_status(trial.status)
    score += weights.STATUS_POINTS[status]
    if status in _STATUS_NOTES:
        reasons.append(_STATUS_NOTES[status])

    # No distance lookup: a listed city plus a patient ZIP counts as in range.
    if (trial.city or "").strip() and (patient.zip_code or "").strip():
        score += weights.PROXIMITY_POINTS
        reasons.append("Trial location likely within travel range (approx).")

    if weights.LONG_TERM_MARKER in trial.title.lower():
        reasons.append("Longer-duration trial.")
    else:
        score += weights.SHORT_DURATION_POINTS
        reasons.append("Shorter study duration (< 1 year).")

    capped = min(score, weights.CONVENIENCE_CAP)
    return CategoryScore(score=capped, reasons=reasons)
