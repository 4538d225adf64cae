"""Exception types raised by the earnings engine."""


class EarningsError(Exception):
    """Base class for engine errors."""


class InvalidFilterError(EarningsError, ValueError):
    """A caller-supplied range, goal or pagination value is not acceptable."""
