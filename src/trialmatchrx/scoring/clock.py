"""Injectable "now" for recency scoring."""

from __future__ import annotations

import abc
from datetime import UTC, date, datetime, time

_REDUCED_PRECISION_FORMATS = ("%Y-%m", "%Y")


class Clock(abc.ABC):
    """Source of the current time, always timezone-aware UTC."""

    @abc.abstractmethod
    def now(self) -> datetime:
        """Return the current instant."""

    def today(self) -> date:
        return self.now().date()


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(tz=UTC)


class FixedClock(Clock):
    """Clock pinned to one instant. A bare date means midnight UTC."""

    def __init__(self, at: datetime | date):
        if not isinstance(at, datetime):
            at = datetime.combine(at, time.min)
        self._at = to_utc(at)

    def now(self) -> datetime:
        return self._at

    def __repr__(self) -> str:
        return f"FixedClock({self._at.isoformat()})"


def to_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def parse_iso_date(raw: str | None) -> date | None:
    """Parse an ISO-8601 date or datetime string to a UTC calendar date.

    Reduced-precision dates ("2025-12", "2025") resolve to the first day of
    the month or year. Returns None for anything unparseable; registry dates
    are often missing or partial.
    """
    if not raw or not isinstance(raw, str):
        return None
    text = raw.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        parsed = _parse_reduced_precision(text)
        if parsed is None:
            return None
    return to_utc(parsed).date()


def _parse_reduced_precision(text: str) -> datetime | None:
    for fmt in _REDUCED_PRECISION_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def resolve_clock(clock: Clock | None) -> Clock:
    return clock if clock is not None else SystemClock()
