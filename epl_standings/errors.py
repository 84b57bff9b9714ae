from __future__ import annotations


class StandingsError(Exception):
    """Base class for errors raised while building a standings table."""


class InvalidCutoffError(StandingsError, ValueError):
    """Raised when the cutoff date is not a valid calendar date."""


class InvalidSeasonError(StandingsError, ValueError):
    """Raised when a season key is not in 'yyyy/yy' (or 'yyzz') form."""


class EmptyMatchLogError(StandingsError):
    """Raised when no usable match was played on or before the cutoff."""
