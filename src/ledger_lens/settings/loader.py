"""Settings helpers to centralize configuration access."""
from __future__ import annotations

from dataclasses import fields, replace
from typing import Any, Optional

from ledger_lens.config import Config

_FIELD_NAMES = {item.name for item in fields(Config)}


def load_settings(debug_override: Optional[bool] = None, **overrides: Any) -> Config:
    """Return the environment Config with runtime overrides applied.

    ``None`` overrides are ignored so CLI options can be passed straight through.
    Overrides go through ``dataclasses.replace`` and are validated again.
    """
    unknown = set(overrides) - _FIELD_NAMES
    if unknown:
        raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")

    changes = {key: value for key, value in overrides.items() if value is not None}
    if debug_override is not None:
        changes["debug"] = debug_override

    config = Config.from_env()
    return replace(config, **changes) if changes else config
