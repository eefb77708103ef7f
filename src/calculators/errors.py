"""Exceptions raised by the calculators.

Every fatal condition derives from CalculationError so callers can catch the
whole family at one seam (the HTTP layer does exactly that).
"""


class CalculationError(Exception):
    """Base class for all calculation failures."""


class InvalidInputError(CalculationError, ValueError):
    """Raised when the caller-supplied input cannot be calculated."""


class ConfigurationError(CalculationError, ValueError):
    """Raised when rule data is missing, malformed or does not fit the input."""


class RegimeNotApplicableError(ConfigurationError):
    """Raised when a corporate regime's eligibility conditions are not met."""


class UnsupportedCompoundingError(ConfigurationError):
    """Raised when a rate conversion is asked for an unsupported compounding mode."""


class UnknownCalculatorError(ConfigurationError):
    """Raised when no calculator is registered for a kind/country pair."""


class CoverageError(CalculationError):
    """Raised when a loan ratio exceeds every configured insurance tier."""
