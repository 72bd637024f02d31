"""Match aggregation: evidence (60%) + eligibility (25%) + convenience (15%).

score_match() is the reusable core for one (trial, patient) pair.
rank_trials() is a pure map over trials followed by a deterministic sort.
"""

from __future__ import annotations

from collections.abc import Iterable

from trialmatchrx.models.schema import (
    CategoryContributions,
    EvidenceInput,
    MatchScoreResult,
    MatchTier,
    PatientProfile,
    RankedMatch,
    TrialData,
)
from trialmatchrx.scoring import weights
from trialmatchrx.scoring.clock import Clock, FixedClock, resolve_clock
from trialmatchrx.scoring.convenience import score_convenience
from trialmatchrx.scoring.eligibility import score_eligibility
from trialmatchrx.scoring.evidence import score_evidence
from trialmatchrx.scoring.utils import clamp, round_half_up


def match_tier(match_score: int) -> MatchTier:
    for minimum, tier in weights.MATCH_TIER_THRESHOLDS:
        if match_score >= minimum:
            return tier
    return MatchTier.LOW


def _display(contribution: float, weight: float) -> int:
    """Re-express a weighted contribution on the 0-100 display scale."""
    return int(clamp(round_half_up(contribution / weight), 0, 100))


def score_match(
    trial: TrialData, patient: PatientProfile, clock: Clock | None = None
) -> MatchScoreResult:
    """Score one trial for one patient.

    The three scorers are independent; their reasons are concatenated in
    fixed order (evidence, eligibility, convenience).
    """
    clock = resolve_clock(clock)

    evidence = score_evidence(EvidenceInput.from_trial(trial), clock=clock)
    eligibility = score_eligibility(trial, patient)
    convenience = score_convenience(trial, patient)

    contributions = CategoryContributions(
        evidence=evidence.score * weights.EVIDENCE_WEIGHT,
        eligibility=eligibility.score,
        convenience=convenience.score,
    )
    total = contributions.evidence + contributions.eligibility + contributions.convenience
    match_score = int(clamp(round_half_up(total), 0, 100))

    return MatchScoreResult(
        nct_id=trial.nct_id,
        match_score=match_score,
        clinical_evidence=_display(contributions.evidence, weights.EVIDENCE_WEIGHT),
        eligibility_fit=_display(contributions.eligibility, weights.ELIGIBILITY_WEIGHT),
        convenience_score=_display(contributions.convenience, weights.CONVENIENCE_WEIGHT),
        reasoning=[*evidence.reasons, *eligibility.reasons, *convenience.reasons],
        tier=match_tier(match_score),
        contributions=contributions,
        evidence_breakdown=evidence.breakdown,
    )


def rank_trials(
    trials: Iterable[TrialData], patient: PatientProfile, clock: Clock | None = None
) -> list[RankedMatch]:
    """Score and rank trials, best first.

    Ties on match score are broken by ascending NCT ID. All trials are scored
    against the same instant, so a ranking never straddles midnight.
    """
    pinned = FixedClock(resolve_clock(clock).now())
    results = [score_match(trial, patient, clock=pinned) for trial in trials]
    results.sort(key=lambda r: (-r.match_score, r.nct_id))
    return [RankedMatch(rank=i, result=r) for i, r in enumerate(results, start=1)]
