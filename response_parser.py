"""Locate and parse the JSON payload inside provider prose."""

from __future__ import annotations

import json
from typing import Any

from errors import ProviderError
from models import SolutionResult

_decoder = json.JSONDecoder()


def extract_json_object(text: str) -> dict[str, Any]:
    """Return the first balanced ``{...}`` object embedded in ``text``.

    Providers sometimes prefix or suffix the structured payload with
    explanatory prose, so the object is decoded in place starting at the
    first opening brace.
    """
    start = text.find("{")
    if start < 0:
        raise ProviderError("Could not extract JSON from provider response")
    try:
        value, _ = _decoder.raw_decode(text, start)
    except json.JSONDecodeError as exc:
        raise ProviderError(f"Provider response is not valid JSON: {exc.msg}") from exc
    return value


def parse_solution(text: str) -> SolutionResult:
    return SolutionResult.from_mapping(extract_json_object(text))
