"""Client facade turning CSV transaction data into model-backed financial reports."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ledger_lens.config import Config
from ledger_lens.domain.models.analysis import FinancialAnalysis
from ledger_lens.domain.schema import analysis_response_format, validate_payload
from ledger_lens.errors import (
    AnalysisFailedError,
    ConfigurationError,
    ForecastFailedError,
    MalformedAnalysisError,
    QueryFailedError,
    ResponseParseError,
)
from ledger_lens.infrastructure.llm.gemini_client import GeminiClient
from ledger_lens.services import prompts
from ledger_lens.services.parsing import parse_json_response

logger = logging.getLogger(__name__)

ANALYSIS_TEMPERATURE = 0.2
FORECAST_TEMPERATURE = 0.3
OUTLETS_TEMPERATURE = 0.0
QUERY_TEMPERATURE = 0.1


@dataclass(frozen=True)
class LLMRequest:
    """Everything needed for one model call."""

    operation: str
    prompt: str
    temperature: float
    response_format: Optional[Dict[str, Any]] = None

    def messages(self) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": prompts.SYSTEM_PROMPT},
            {"role": "user", "content": self.prompt},
        ]


@dataclass(frozen=True)
class Completion:
    """Outcome of a model call: the raw text, or why there is none."""

    text: str = ""
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass(frozen=True)
class OutletDetection:
    """Outlets found in the data, or the reason detection did not succeed."""

    outlets: List[str] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _require_text(value: str, name: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"{name} must be non-empty text")


class AnalysisClient:
    """Send CSV transactions to Gemini and shape the replies.

    Every operation is one independent request. Nothing is cached or retried,
    and the client keeps no state between calls beyond its gateway.
    """

    def __init__(self, config: Config, *, gemini: Optional[GeminiClient] = None) -> None:
        if not config.has_credentials:
            raise ConfigurationError("API key not found; set GEMINI_API_KEY or pass api_key.")
        self._config = config
        self._owns_gemini = gemini is None
        self._gemini = gemini or GeminiClient(
            api_key=config.api_key or "",
            model=config.model,
            base_url=config.base_url,
            proxy_url=config.proxy_url,
            timeout=config.request_timeout,
        )

    @property
    def config(self) -> Config:
        return self._config

    async def __aenter__(self) -> "AnalysisClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the gateway when this client created it."""
        if self._owns_gemini:
            await self._gemini.aclose()

    async def analyze_financial_data(
        self, csv_data: str, outlet: Optional[str] = None
    ) -> FinancialAnalysis:
        """Produce the full report, optionally scoped to a single outlet."""
        _require_text(csv_data, "csv_data")
        request = LLMRequest(
            operation="analysis",
            prompt=prompts.build_analysis_prompt(csv_data, outlet, self._config.currency_code),
            temperature=ANALYSIS_TEMPERATURE,
            response_format=analysis_response_format(),
        )
        completion = await self._try_complete(request)
        if completion.failed:
            raise AnalysisFailedError()

        analysis: Optional[FinancialAnalysis] = None
        try:
            payload = parse_json_response(completion.text)
            analysis = validate_payload(payload, strict=self._config.strict_validation)
        except ResponseParseError:
            logger.exception("Gemini returned an unusable analysis body")
        if analysis is None:
            raise MalformedAnalysisError()
        return analysis

    async def get_updated_forecast(
        self, csv_data: str, revenue_growth_pct: float, expense_growth_pct: float
    ) -> str:
        """Short projection for the next period under the given growth rates."""
        _require_text(csv_data, "csv_data")
        for name, value in (
            ("revenue_growth_pct", revenue_growth_pct),
            ("expense_growth_pct", expense_growth_pct),
        ):
            if not math.isfinite(value):
                raise ValueError(f"{name} must be a finite number")

        request = LLMRequest(
            operation="forecast",
            prompt=prompts.build_forecast_prompt(
                csv_data, revenue_growth_pct, expense_growth_pct, self._config.currency_code
            ),
            temperature=FORECAST_TEMPERATURE,
        )
        completion = await self._try_complete(request)
        if completion.failed:
            raise ForecastFailedError()
        return completion.text.strip()

    async def detect_outlets(self, csv_data: str) -> OutletDetection:
        """Ask the model for distinct outlet names; failures come back as values."""
        if not isinstance(csv_data, str) or not csv_data.strip():
            return OutletDetection(error="No CSV data supplied.")

        request = LLMRequest(
            operation="outlets",
            prompt=prompts.build_outlets_prompt(csv_data),
            temperature=OUTLETS_TEMPERATURE,
        )
        completion = await self._try_complete(request)
        if completion.failed:
            return OutletDetection(error=completion.error)

        try:
            parsed = parse_json_response(completion.text)
        except ResponseParseError as exc:
            return OutletDetection(error=str(exc))
        if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
            return OutletDetection(error="Response is not a JSON array of strings.")
        return OutletDetection(outlets=parsed)

    async def get_outlets(self, csv_data: str) -> List[str]:
        """Distinct outlet names in the data; empty when none can be found.

        Never raises: a missing outlet column and a failed call look the same.
        """
        detection = await self.detect_outlets(csv_data)
        if not detection.ok:
            logger.warning("Outlet detection unavailable, assuming none: %s", detection.error)
            return []
        return list(detection.outlets)

    async def query_data(self, csv_data: str, query: str) -> str:
        """Answer a free-form question strictly from the supplied data."""
        _require_text(csv_data, "csv_data")
        _require_text(query, "query")
        request = LLMRequest(
            operation="query",
            prompt=prompts.build_query_prompt(csv_data, query, self._config.currency_code),
            temperature=QUERY_TEMPERATURE,
        )
        completion = await self._try_complete(request)
        if completion.failed:
            raise QueryFailedError()
        return completion.text.strip()

    async def _complete(self, request: LLMRequest) -> str:
        logger.debug(
            "Gemini %s request: model=%s temperature=%s schema=%s prompt_chars=%d",
            request.operation,
            self._config.model,
            request.temperature,
            request.response_format is not None,
            len(request.prompt),
        )
        return await self._gemini.generate(
            request.messages(),
            temperature=request.temperature,
            response_format=request.response_format,
        )

    async def _try_complete(self, request: LLMRequest) -> Completion:
        # Errors are logged here and reported as values so callers raise their
        # own operation error without chaining the transport exception.
        try:
            text = await self._complete(request)
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception("Error calling Gemini API for %s", request.operation)
            return Completion(error=f"{type(exc).__name__}: {exc}")
        return Completion(text=text)
