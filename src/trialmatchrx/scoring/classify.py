"""Free-text classification for registry fields.

Registry text is inconsistent ("Phase 3", "PHASE 2/PHASE 3", "Recruiting",
"Active, not recruiting"), so each field is parsed once into a tag here and
the scorers only ever look at tags.
"""

from __future__ import annotations

import enum


class PhaseTier(enum.StrEnum):
    PHASE_3 = "PHASE_3"
    PHASE_4 = "PHASE_4"
    PHASE_2 = "PHASE_2"
    PHASE_1 = "PHASE_1"
    NOT_APPLICABLE = "NOT_APPLICABLE"
    UNKNOWN = "UNKNOWN"


class EndpointKind(enum.StrEnum):
    OS = "OS"
    PFS = "PFS"
    ORR = "ORR"
    OTHER = "OTHER"
    NONE = "NONE"


class RecruitmentStatus(enum.StrEnum):
    RECRUITING = "RECRUITING"
    ACTIVE = "ACTIVE"
    OTHER = "OTHER"


# Checked in order; the first substring hit wins.
_PHASE_PATTERNS: tuple[tuple[str, PhaseTier], ...] = (
    ("phase 3", PhaseTier.PHASE_3),
    ("phase 4", PhaseTier.PHASE_4),
    ("phase 2", PhaseTier.PHASE_2),
    ("phase 1", PhaseTier.PHASE_1),
    ("not applicable", PhaseTier.NOT_APPLICABLE),
    ("n/a", PhaseTier.NOT_APPLICABLE),
)


def parse_phase(text: str | None) -> PhaseTier:
    """Map phase text to a tier by case-insensitive substring match.

    A combined phase like "Phase 2/Phase 3" takes the higher-priority tier.
    """
    p = (text or "").lower()
    for needle, tier in _PHASE_PATTERNS:
        if needle in p:
            return tier
    return PhaseTier.UNKNOWN


def normalize_endpoint(text: str | None) -> str:
    return (text or "").strip().upper()


def parse_endpoint(text: str | None) -> EndpointKind:
    ep = normalize_endpoint(text)
    if not ep:
        return EndpointKind.NONE
    try:
        kind = EndpointKind(ep)
    except ValueError:
        return EndpointKind.OTHER
    # "OTHER"/"NONE" typed literally are still just free text
    if kind in (EndpointKind.OTHER, EndpointKind.NONE):
        return EndpointKind.OTHER
    return kind


def parse_status(text: str | None) -> RecruitmentStatus:
    """Recruitment status from free text.

    Any text containing "recruiting" counts as recruiting, including
    "Not yet recruiting" and "Active, not recruiting".
    """
    s = (text or "").lower()
    if "recruiting" in s:
        return RecruitmentStatus.RECRUITING
    if "active" in s:
        return RecruitmentStatus.ACTIVE
    return RecruitmentStatus.OTHER
