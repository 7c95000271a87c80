"""
JEPX Signals Exceptions

Simple exception hierarchy for error handling.
"""


class JepxSignalsError(Exception):
    """Base exception for the signals engine."""

    pass


class ValidationError(JepxSignalsError, ValueError):
    """Required input is empty or malformed."""

    pass


class DataUnavailableError(JepxSignalsError, LookupError):
    """A companion series or price point is missing."""

    pass


class DivisionUndefined(JepxSignalsError, ZeroDivisionError):
    """Projection denominator is zero."""

    pass
