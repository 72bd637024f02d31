"""Domain models for trial match scoring.

Inputs (TrialData, PatientProfile, EvidenceInput) come from the registry
client and the profile store; outputs (EvidenceOutput, MatchScoreResult)
go to the UI and to run artifacts. All records are frozen: the scoring
engine reads them and never mutates them.

Attribute names are snake_case; camelCase aliases match the registry and
UI payloads (``nctId``, ``primaryEndpoint``, ...). Both are accepted on input.
"""

from __future__ import annotations

import enum
import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MatchTier(enum.StrEnum):
    """Display tier for an overall match score."""

    HIGH = "HIGH"
    MODERATE = "MODERATE"
    LOW = "LOW"


class _Record(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)


def _as_string_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return value


def _lenient_count(value: Any) -> int | None:
    """Enrollment-style counts: anything non-numeric or negative is absent."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return None
    if not isinstance(value, int | float) or not math.isfinite(value) or value < 0:
        return None
    return int(value)


class TrialData(_Record):
    """A single trial record as normalized by the registry client.

    ``conditions`` keeps whatever shape the registry produced: one string
    or an ordered list of strings.
    """

    nct_id: str = Field(default="", alias="nctId")
    title: str = ""
    phase: str | None = None
    status: str | None = None
    conditions: str | list[str] | None = None
    biomarkers: list[str] = Field(default_factory=list)
    city: str | None = None
    state: str | None = None
    country: str | None = None
    randomized: bool = False
    primary_endpoint: str | None = Field(default=None, alias="primaryEndpoint")
    met_primary: bool = Field(default=False, alias="metPrimary")
    has_results: bool = Field(default=False, alias="hasResults")
    total_enrollment: int | None = Field(default=None, alias="totalEnrollment")
    first_posted_date_iso: str | None = Field(default=None, alias="firstPostedDateISO")
    last_update_date_iso: str | None = Field(default=None, alias="lastUpdateDateISO")

    @field_validator("biomarkers", mode="before")
    @classmethod
    def _biomarkers_list(cls, value: Any) -> Any:
        return _as_string_list(value)

    @field_validator("randomized", "met_primary", "has_results", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("title", mode="before")
    @classmethod
    def _title_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("total_enrollment", mode="before")
    @classmethod
    def _enrollment_count(cls, value: Any) -> int | None:
        return _lenient_count(value)

    def condition_list(self) -> list[str]:
        """Conditions as a list regardless of the registry's shape."""
        if self.conditions is None:
            return []
        if isinstance(self.conditions, str):
            return [self.conditions]
        return list(self.conditions)


class PatientProfile(_Record):
    """Patient-supplied matching profile. Every field may be blank."""

    condition: str | None = None
    stage: str | None = None
    biomarkers: list[str] = Field(default_factory=list)
    zip_code: str | None = Field(default=None, alias="zipCode")
    willing_to_travel_miles: float | None = Field(default=None, alias="willingToTravelMiles")

    @field_validator("biomarkers", mode="before")
    @classmethod
    def _biomarkers_list(cls, value: Any) -> Any:
        return _as_string_list(value)


class EvidenceInput(_Record):
    """Trial attributes that drive the evidence score."""

    phase: str | None = None
    randomized: bool = False
    primary_endpoint: str | None = Field(default=None, alias="primaryEndpoint")
    has_results: bool = Field(default=False, alias="hasResults")
    met_primary: bool = Field(default=False, alias="metPrimary")
    biomarker_hits: list[str] = Field(default_factory=list, alias="biomarkerHits")
    total_enrollment: int | None = Field(default=None, alias="totalEnrollment")
    first_posted_date_iso: str | None = Field(default=None, alias="firstPostedDateISO")
    last_update_date_iso: str | None = Field(default=None, alias="lastUpdateDateISO")

    @field_validator("randomized", "met_primary", "has_results", mode="before")
    @classmethod
    def _flag(cls, value: Any) -> Any:
        return False if value is None else value

    @field_validator("biomarker_hits", mode="before")
    @classmethod
    def _hits_list(cls, value: Any) -> Any:
        return _as_string_list(value)

    @field_validator("total_enrollment", mode="before")
    @classmethod
    def _enrollment_count(cls, value: Any) -> int | None:
        return _lenient_count(value)

    @classmethod
    def from_trial(cls, trial: TrialData) -> EvidenceInput:
        return cls(
            phase=trial.phase,
            randomized=trial.randomized,
            primary_endpoint=trial.primary_endpoint,
            has_results=trial.has_results,
            met_primary=trial.met_primary,
            biomarker_hits=trial.biomarkers,
            total_enrollment=trial.total_enrollment,
            first_posted_date_iso=trial.first_posted_date_iso,
            last_update_date_iso=trial.last_update_date_iso,
        )


class EvidenceBreakdown(_Record):
    """Per-factor point contributions. ``cap`` is the raw pre-clamp sum."""

    phase: int = 0
    randomized: int = 0
    endpoint: int = 0
    met_primary: int = Field(default=0, alias="metPrimary")
    results_posted: int = Field(default=0, alias="resultsPosted")
    biomarkers: int = 0
    enrollment: int = 0
    recency: int = 0
    cap: int = 0


class EvidenceOutput(_Record):
    score: int = Field(ge=0, le=100)
    reasons: list[str] = Field(default_factory=list)
    breakdown: EvidenceBreakdown = Field(default_factory=EvidenceBreakdown)


class CategoryScore(_Record):
    """Capped points for one category plus the reasons that produced them."""

    score: float
    reasons: list[str] = Field(default_factory=list)


class CategoryContributions(_Record):
    """Raw weighted contributions that sum to the match score.

    evidence is 0-60, eligibility 0-25, convenience 0-15.
    """

    evidence: float
    eligibility: float
    convenience: float


class MatchScoreResult(_Record):
    """Overall match for one (trial, patient) pair.

    The three sub-score fields are display-normalized to 0-100; the raw
    weighted values live in ``contributions``.
    """

    nct_id: str = Field(alias="nctId")
    match_score: int = Field(ge=0, le=100, alias="matchScore")
    clinical_evidence: int = Field(ge=0, le=100, alias="clinicalEvidence")
    eligibility_fit: int = Field(ge=0, le=100, alias="eligibilityFit")
    convenience_score: int = Field(ge=0, le=100, alias="convenienceScore")
    reasoning: list[str] = Field(default_factory=list)
    tier: MatchTier
    contributions: CategoryContributions
    evidence_breakdown: EvidenceBreakdown = Field(alias="evidenceBreakdown")


class RankedMatch(_Record):
    rank: int = Field(ge=1)
    result: MatchScoreResult


class RankingRun(BaseModel):
    """One ranking run for a patient, as saved by the run manager."""

    run_id: str
    as_of: str  # ISO date used for recency scoring
    patient: PatientProfile
    matches: list[RankedMatch]
