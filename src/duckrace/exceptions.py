"""Exceptions raised by the race engine.

Only precondition failures are errors. Fizzled skills and races that hit the
time ceiling are ordinary outcomes and show up in the race result instead.
"""


class DuckRaceError(Exception):
    """Base exception for all race engine errors."""

    pass


class InvalidParticipantsError(DuckRaceError, ValueError):
    """Raised when the participant list cannot be raced (empty, duplicate ids, ...)."""

    pass


class InvalidConfigError(DuckRaceError, ValueError):
    """Raised when a race configuration cannot be built from plain data."""

    pass
