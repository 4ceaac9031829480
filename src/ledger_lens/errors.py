"""Exception hierarchy raised by the analysis client."""
from __future__ import annotations

from typing import Optional


class LedgerLensError(Exception):
    """Base class for every error this package raises on purpose."""


class ConfigurationError(LedgerLensError):
    """Required configuration (the API credential) is missing."""


class ResponseParseError(LedgerLensError):
    """The model answered, but the body is not JSON or has the wrong shape."""


class AnalysisFailedError(LedgerLensError):
    """The full financial analysis could not be produced."""

    default_message = "Failed to get a valid response from the AI model."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)


class MalformedAnalysisError(AnalysisFailedError):
    """The model replied with a body that did not match the report shape."""


class ForecastFailedError(LedgerLensError):
    default_message = "Failed to get an updated forecast from the AI model."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)


class QueryFailedError(LedgerLensError):
    default_message = "Failed to get a response from the AI model for your query."

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or self.default_message)
