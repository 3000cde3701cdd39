"""Suggestion extraction from free-text generation output.

The generation service is asked to answer with ``{"suggestions": [...]}``
but nothing forces it to comply.  Extraction therefore has two branches:

1. **Structured**: the whole text is a JSON value with an array-valued
   ``suggestions`` field.  That array is returned as-is (no truncation or
   padding).
2. **Line fallback**: anything else.  The text is split into lines, blank
   lines are dropped and the first five remaining lines are returned in
   order.

Extraction never raises; the worst case is an empty line-fallback result.
The branch taken is visible in the result type so callers can log degraded
responses.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

MAX_FALLBACK_LINES = 5

# Sentinel for "not valid JSON"; ``None`` is a valid JSON value.
_NOT_JSON = object()


@dataclass(frozen=True)
class StructuredSuggestions:
    """Suggestions read from a well-formed JSON answer."""

    items: list[str]


@dataclass(frozen=True)
class LineFallbackSuggestions:
    """Suggestions recovered line by line from a non-conforming answer."""

    items: list[str]


SuggestionResult = StructuredSuggestions | LineFallbackSuggestions


def _parse_json(raw_text: str) -> Any:
    """Return the decoded JSON value, or ``_NOT_JSON`` if *raw_text* is not JSON."""
    try:
        return json.loads(raw_text)
    except (ValueError, RecursionError):
        return _NOT_JSON


def _structured_items(value: Any) -> list[str] | None:
    """Return the ``suggestions`` array of a decoded value, if it has one."""
    if not isinstance(value, dict):
        return None
    suggestions = value.get("suggestions")
    if not isinstance(suggestions, list):
        return None
    return [
        item if isinstance(item, str) else json.dumps(item, ensure_ascii=False)
        for item in suggestions
    ]


def _fallback_lines(raw_text: str, limit: int = MAX_FALLBACK_LINES) -> list[str]:
    lines = (line.strip() for line in raw_text.splitlines())
    return [line for line in lines if line][:limit]


def extract_suggestions(raw_text: str | None) -> SuggestionResult:
    """Turn raw generation output into an ordered list of suggestions.

    Args:
        raw_text: Text content of the first completion.  ``None`` is
            treated as an empty answer.

    Returns:
        :class:`StructuredSuggestions` when the text is a JSON object with
        a ``suggestions`` array, otherwise :class:`LineFallbackSuggestions`
        holding at most five non-blank lines.
    """
    text = raw_text or ""

    items = _structured_items(_parse_json(text))
    if items is not None:
        return StructuredSuggestions(items)

    fallback = LineFallbackSuggestions(_fallback_lines(text))
    logger.debug(f"Output was not structured JSON; recovered {len(fallback.items)} line(s)")
    return fallback
