"""SCORING module: (TrialData, PatientProfile) → MatchScoreResult.

Public API:
  score_evidence() — evidence strength, 0-100, with reasons and breakdown
  score_match()    — overall 0-100 match with display-normalized sub-scores
  rank_trials()    — score many trials and order them best first
"""

from trialmatchrx.scoring.aggregate import match_tier, rank_trials, score_match
from trialmatchrx.scoring.clock import Clock, FixedClock, SystemClock
from trialmatchrx.scoring.evidence import score_evidence

__all__ = [
    "Clock",
    "FixedClock",
    "SystemClock",
    "match_tier",
    "rank_trials",
    "score_evidence",
    "score_match",
]
