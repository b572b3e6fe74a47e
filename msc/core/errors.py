"""Error taxonomy for the scenario comparison core."""

from __future__ import annotations


class ScenarioValidationError(ValueError):
    """User-correctable input problem; the message is shown verbatim."""


class CalculationError(ArithmeticError):
    """Amortization produced a non-finite payment for otherwise valid inputs."""

    def __init__(self, message: str = "Could not calculate mortgage amortization. Please check input values.") -> None:
        super().__init__(message)


class ConfigurationError(ValueError):
    """Malformed configuration payload. Recovered by falling back to defaults."""
