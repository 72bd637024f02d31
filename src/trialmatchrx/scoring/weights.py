"""Weight tables for match scoring.

All tables are read-only. Changing a weight here changes every score, so
keep the evidence table in step with the reason strings in evidence.py.
"""

from __future__ import annotations

from types import MappingProxyType

from trialmatchrx.models.schema import MatchTier
from trialmatchrx.scoring.classify import EndpointKind, PhaseTier, RecruitmentStatus

# --- Evidence (0-100 before category weighting) ---

PHASE_POINTS = MappingProxyType(
    {
        PhaseTier.PHASE_3: 55,
        PhaseTier.PHASE_4: 45,
        PhaseTier.PHASE_2: 35,
        PhaseTier.PHASE_1: 15,
        PhaseTier.NOT_APPLICABLE: 10,
        PhaseTier.UNKNOWN: 10,
    }
)

ENDPOINT_POINTS = MappingProxyType(
    {
        EndpointKind.OS: 18,
        EndpointKind.PFS: 12,
        EndpointKind.ORR: 6,
        EndpointKind.OTHER: 4,
        EndpointKind.NONE: 0,
    }
)

RANDOMIZED_POINTS = 12
MET_PRIMARY_POINTS = 20
RESULTS_POSTED_POINTS = 8

BIOMARKER_POINTS_EACH = 5
BIOMARKER_POINTS_CAP = 15

# (minimum enrollment, points), highest threshold first
ENROLLMENT_TIERS: tuple[tuple[int, int], ...] = (
    (800, 10),
    (400, 8),
    (200, 6),
    (100, 4),
    (50, 2),
)

RECENCY_MAX_POINTS = 5
RECENCY_HORIZON_DAYS = 365

PRELIMINARY_EVIDENCE_THRESHOLD = 30

# --- Eligibility fit (capped at 25) ---

CONDITION_MATCH_POINTS = 10
STAGE_MATCH_POINTS = 5
BIOMARKER_OVERLAP_POINTS_EACH = 2.5
BIOMARKER_OVERLAP_CAP = 5
NO_EXCLUSION_CONFLICT_POINTS = 5
ELIGIBILITY_CAP = 25

# --- Convenience (capped at 15) ---

STATUS_POINTS = MappingProxyType(
    {
        RecruitmentStatus.RECRUITING: 5,
        RecruitmentStatus.ACTIVE: 3,
        RecruitmentStatus.OTHER: 0,
    }
)
PROXIMITY_POINTS = 5
SHORT_DURATION_POINTS = 5
LONG_TERM_MARKER = "long term"
CONVENIENCE_CAP = 15

# --- Aggregation ---

EVIDENCE_WEIGHT = 0.6
ELIGIBILITY_WEIGHT = 0.25
CONVENIENCE_WEIGHT = 0.15

# (minimum match score, tier label), highest first
MATCH_TIER_THRESHOLDS: tuple[tuple[int, MatchTier], ...] = (
    (85, MatchTier.HIGH),
    (60, MatchTier.MODERATE),
)
