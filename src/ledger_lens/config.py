"""Application-wide configuration defaults and helpers."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

# Google's OpenAI-compatible surface for Gemini models.
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_CURRENCY = "AED"


def _to_bool(value: Optional[str], default: bool = False) -> bool:
    """Parse truthy environment values like '1' or 'true'."""
    if value is None:
        return default
    if not isinstance(value, str):
        value = str(value)
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _to_float(value: Optional[str], default: float) -> float:
    """Safely parse a float env var, falling back to the default on failure."""
    if value is None:
        return default
    try:
        return float(str(value).strip())
    except (TypeError, ValueError):
        return default


@dataclass
class Config:
    """Runtime configuration for the analysis client."""

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    proxy_url: Optional[str] = None
    request_timeout: float = 120.0
    currency_code: str = DEFAULT_CURRENCY
    strict_validation: bool = True
    debug: bool = False

    def __post_init__(self) -> None:
        code = (self.currency_code or "").strip().upper()
        if len(code) != 3 or not code.isalpha():
            raise ValueError(f"currency_code must be a three-letter code, got {self.currency_code!r}")
        self.currency_code = code
        if self.request_timeout <= 0:
            raise ValueError("request_timeout must be positive")

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.api_key.strip())

    @classmethod
    def from_env(cls) -> "Config":
        """Build a configuration instance using environment overrides."""
        return cls(
            api_key=os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY"),
            model=os.getenv("GEMINI_MODEL", DEFAULT_MODEL),
            base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL),
            proxy_url=os.getenv("PROXY_URL"),
            request_timeout=_to_float(os.getenv("LLM_TIMEOUT"), 120.0),
            currency_code=os.getenv("REPORT_CURRENCY", DEFAULT_CURRENCY),
            strict_validation=_to_bool(os.getenv("STRICT_VALIDATION"), default=True),
            debug=_to_bool(os.getenv("APP_DEBUG")),
        )
