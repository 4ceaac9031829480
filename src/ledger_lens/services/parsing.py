"""Turn raw model text into JSON values."""
from __future__ import annotations

import json
import re
from typing import Any

from ledger_lens.errors import ResponseParseError

# A single fence wrapping the whole reply, as models add around JSON answers.
_FENCED_BODY = re.compile(r"^```(?:json)?[ \t]*\n?(.*?)\n?```$", re.DOTALL | re.IGNORECASE)


def strip_code_fence(text: str) -> str:
    """Drop one ```json fence enclosing the whole text, if there is one."""
    stripped = text.strip()
    match = _FENCED_BODY.match(stripped)
    if match:
        return match.group(1).strip()
    return stripped


def parse_json_response(raw: str) -> Any:
    """Parse a model reply as exactly one JSON value.

    The reply must be JSON by itself once trimmed and unfenced. Values are not
    dug out of surrounding prose, and a JSON string is returned as a string
    rather than decoded a second time.
    """
    if raw is None or not str(raw).strip():
        raise ResponseParseError("Model returned an empty body.")

    try:
        return json.loads(strip_code_fence(str(raw)))
    except ValueError as exc:
        raise ResponseParseError(f"Model response is not valid JSON: {exc}") from exc
