"""Eligibility fit: how well the trial's condition, stage and biomarkers
line up with the patient profile. Capped at ELIGIBILITY_CAP points.

These are coarse text heuristics, not an eligibility determination.
"""

from __future__ import annotations

from trialmatchrx.models.schema import CategoryScore, PatientProfile, TrialData
from trialmatchrx.scoring import weights


def condition_matches(trial: TrialData, condition: str | None) -> bool:
    """True if any trial condition contains the patient's condition text."""
    needle = (condition or "").strip().lower()
    if not needle:
        return False
    return any(needle in c.lower() for c in trial.condition_list())


def biomarker_overlap(trial_markers: list[str], patient_markers: list[str]) -> list[str]:
    """Case-insensitive intersection, in trial order, without duplicates."""
    wanted = {m.strip().lower() for m in patient_markers if m.strip()}
    overlap: list[str] = []
    for marker in trial_markers:
        key = marker.strip().lower()
        if key in wanted and key not in overlap:
            overlap.append(key)
    return overlap


def score_eligibility(trial: TrialData, patient: PatientProfile) -> CategoryScore:
    score = 0.0
    reasons: list[str] = []

    if condition_matches(trial, patient.condition):
        score += weights.CONDITION_MATCH_POINTS
        reasons.append(f"Condition match: {patient.condition}")
    else:
        reasons.append("Condition mismatch or unspecified.")

    # Stage is only looked for in the title
    stage = (patient.stage or "").strip()
    if stage and stage.lower() in trial.title.lower():
        score += weights.STAGE_MATCH_POINTS
        reasons.append(f"Stage aligned: {patient.stage}")

    overlap = biomarker_overlap(trial.biomarkers, patient.biomarkers)
    if overlap:
        score += min(
            weights.BIOMARKER_OVERLAP_CAP, len(overlap) * weights.BIOMARKER_OVERLAP_POINTS_EACH
        )
        reasons.append(f"Biomarker overlap: {', '.join(overlap).upper()}")

    # Placeholder: posted results stand in for an exclusion-criteria check.
    # Exclusion criteria text is never inspected.
    if trial.has_results:
        score += weights.NO_EXCLUSION_CONFLICT_POINTS
        reasons.append("No exclusion conflicts detected.")

    capped = min(score, weights.ELIGIBILITY_CAP)
    return CategoryScore(score=capped, reasons=reasons)
