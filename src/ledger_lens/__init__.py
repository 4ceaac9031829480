"""Convenience re-exports for library callers."""
from __future__ import annotations

from ledger_lens.config import Config
from ledger_lens.domain.models.analysis import FinancialAnalysis
from ledger_lens.errors import (
    AnalysisFailedError,
    ConfigurationError,
    ForecastFailedError,
    LedgerLensError,
    MalformedAnalysisError,
    QueryFailedError,
)
from ledger_lens.services.analysis_client import AnalysisClient, OutletDetection

__all__ = [
    "AnalysisClient",
    "AnalysisFailedError",
    "Config",
    "ConfigurationError",
    "FinancialAnalysis",
    "ForecastFailedError",
    "LedgerLensError",
    "MalformedAnalysisError",
    "OutletDetection",
    "QueryFailedError",
]
