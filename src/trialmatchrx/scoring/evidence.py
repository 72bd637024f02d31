"""Evidence scoring: how strong is the clinical evidence behind a trial?

Deterministic, interpretable 0-100 score built from independent weighted
factors, each of which explains itself with one reason string:

  phase -> randomized -> endpoint -> primary met -> results posted
  -> biomarkers -> enrollment -> recency

Reasons are appended in that fixed order. A final disclaimer is added when
the clamped score is below PRELIMINARY_EVIDENCE_THRESHOLD.
"""

from __future__ import annotations

from typing import NamedTuple

from trialmatchrx.models.schema import EvidenceBreakdown, EvidenceInput, EvidenceOutput
from trialmatchrx.scoring import weights
from trialmatchrx.scoring.classify import (
    EndpointKind,
    PhaseTier,
    normalize_endpoint,
    parse_endpoint,
    parse_phase,
)
from trialmatchrx.scoring.clock import Clock, parse_iso_date, resolve_clock
from trialmatchrx.scoring.utils import clamp, round_half_up


PRELIMINARY_REASON = "Overall evidence remains preliminary/limited."

_PHASE_NOTES = {
    PhaseTier.PHASE_3: "Phase III — confirmatory efficacy evidence.",
    PhaseTier.PHASE_4: "Phase IV — post-marketing/real-world evidence.",
    PhaseTier.PHASE_2: "Phase II — moderate clinical evidence.",
    PhaseTier.PHASE_1: "Phase I — preliminary safety/PK evidence.",
    PhaseTier.NOT_APPLICABLE: "Not applicable phase — limited evidence tier.",
    PhaseTier.UNKNOWN: "Unspecified phase — treated as limited evidence.",
}

_ENDPOINT_NOTES = {
    EndpointKind.OS: "Primary endpoint: Overall Survival (OS).",
    EndpointKind.PFS: "Primary endpoint: Progression-Free Survival (PFS).",
    EndpointKind.ORR: "Primary endpoint: Objective Response Rate (ORR).",
}


class Factor(NamedTuple):
    """Points for one factor and its reason (None when nothing to say)."""

    points: int
    note: str | None = None


def phase_factor(phase: str | None) -> Factor:
    tier = parse_phase(phase)
    return Factor(weights.PHASE_POINTS[tier], _PHASE_NOTES[tier])


def endpoint_factor(endpoint: str | None) -> Factor:
    kind = parse_endpoint(endpoint)
    if kind == EndpointKind.NONE:
        return Factor(0)
    note = _ENDPOINT_NOTES.get(kind) or f"Primary endpoint: {normalize_endpoint(endpoint)}."
    return Factor(weights.ENDPOINT_POINTS[kind], note)


def biomarker_factor(hits: list[str]) -> Factor:
    if not hits:
        return Factor(0)
    points = min(weights.BIOMARKER_POINTS_CAP, len(hits) * weights.BIOMARKER_POINTS_EACH)
    label = ", ".join(h.upper() for h in hits)
    return Factor(points, f"Biomarker alignment: {label}.")


def enrollment_factor(total: int | None) -> Factor:
    """Tiered points on enrollment size; any positive N gets a reason."""
    if not total or total <= 0:
        return Factor(0)
    points = next((pts for minimum, pts in weights.ENROLLMENT_TIERS if total >= minimum), 0)
    return Factor(points, f"Enrollment size ~{total} participants.")


def recency_factor(
    first_posted: str | None, last_update: str | None, clock: Clock
) -> Factor:
    """Up to RECENCY_MAX_POINTS for activity within the last year.

    Uses the later of the two dates; age is counted in whole calendar days.
    """
    dates = [d for d in (parse_iso_date(first_posted), parse_iso_date(last_update)) if d]
    if not dates:
        return Factor(0)
    age_days = max(0, (clock.today() - max(dates)).days)
    fraction = clamp(age_days / weights.RECENCY_HORIZON_DAYS, 0.0, 1.0)
    points = round_half_up((1 - fraction) * weights.RECENCY_MAX_POINTS)
    if points <= 0:
        return Factor(0)
    return Factor(points, f"Recent activity ({age_days} days ago).")


def score_evidence(evidence_input: EvidenceInput, clock: Clock | None = None) -> EvidenceOutput:
    """Compute the evidence score with reasons and per-factor breakdown.

    Never raises: missing or unrecognized values fall to their lowest tier.
    """
    clock = resolve_clock(clock)
    reasons: list[str] = []

    phase = phase_factor(evidence_input.phase)
    randomized = Factor(
        weights.RANDOMIZED_POINTS if evidence_input.randomized else 0,
        f"Randomized design — reduces bias (+{weights.RANDOMIZED_POINTS})."
        if evidence_input.randomized
        else None,
    )
    endpoint = endpoint_factor(evidence_input.primary_endpoint)
    met = Factor(
        weights.MET_PRIMARY_POINTS if evidence_input.met_primary else 0,
        f"Primary endpoint met / significant benefit (+{weights.MET_PRIMARY_POINTS})."
        if evidence_input.met_primary
        else None,
    )
    posted = Factor(
        weights.RESULTS_POSTED_POINTS if evidence_input.has_results else 0,
        f"Results publicly posted (+{weights.RESULTS_POSTED_POINTS})."
        if evidence_input.has_results
        else None,
    )
    biomarkers = biomarker_factor(evidence_input.biomarker_hits)
    enrollment = enrollment_factor(evidence_input.total_enrollment)
    recency = recency_factor(
        evidence_input.first_posted_date_iso, evidence_input.last_update_date_iso, clock
    )

    factors = (phase, randomized, endpoint, met, posted, biomarkers, enrollment, recency)
    reasons.extend(f.note for f in factors if f.note)

    raw = sum(f.points for f in factors)
    score = int(clamp(round_half_up(raw), 0, 100))
    if score < weights.PRELIMINARY_EVIDENCE_THRESHOLD:
        reasons.append(PRELIMINARY_REASON)

    return EvidenceOutput(
        score=score,
        reasons=reasons,
        breakdown=EvidenceBreakdown(
            phase=phase.points,
            randomized=randomized.points,
            endpoint=endpoint.points,
            met_primary=met.points,
            results_posted=posted.points,
            biomarkers=biomarkers.points,
            enrollment=enrollment.points,
            recency=recency.points,
            cap=raw,
        ),
    )
