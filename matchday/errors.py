"""Exception hierarchy for the matchday engine."""

from __future__ import annotations


class MatchdayError(Exception):
    """Base class for all matchday errors."""


class UnknownAttributeError(MatchdayError, ValueError):
    """Raised when an attribute code is outside SHO/DRI/DEF/PAS/PHY/PAC."""

    def __init__(self, code: object) -> None:
        super().__init__(f"Unknown attribute code: {code!r}")
        self.code = code


class ConfigError(MatchdayError, ValueError):
    """Raised for unreadable or invalid configuration."""


class AggregationError(MatchdayError, RuntimeError):
    """Raised when ballot aggregation aborts; nothing has been staged or committed."""


class DuplicateAggregationError(AggregationError):
    """Raised when a match's ratings have already been committed once."""

    def __init__(self, match_id: str) -> None:
        super().__init__(f"Ratings for match {match_id!r} were already aggregated")
        self.match_id = match_id


class InputError(MatchdayError, ValueError):
    """Raised for unreadable or malformed attendee, pin or ballot files."""
