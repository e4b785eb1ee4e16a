from __future__ import annotations

import json
import logging
from typing import Any, List

from seo_insight.domain.errors import ResponseParseError
from seo_insight.domain.models import KeywordRecord

logger = logging.getLogger(__name__)

JSON_FENCE = "```json"
FENCE = "```"
REQUIRED_FIELDS = ("keyword", "metric", "details")


def _strip_code_fence(text: str) -> str:
    """Unwrap at most one layer of markdown code fencing."""
    if JSON_FENCE in text:
        return text.split(JSON_FENCE, 1)[1].split(FENCE, 1)[0]
    if FENCE in text:
        return text.split(FENCE)[1]
    return text


def _to_record(item: Any, index: int, raw_text: str) -> KeywordRecord:
    if not isinstance(item, dict):
        raise ResponseParseError(f"Element {index} is not a JSON object.", raw_text)

    values = {}
    for name in REQUIRED_FIELDS:
        value = item.get(name)
        if not isinstance(value, str):
            raise ResponseParseError(f"Element {index} has no string field '{name}'.", raw_text)
        values[name] = value

    if not values["keyword"].strip():
        raise ResponseParseError(f"Element {index} has an empty keyword.", raw_text)

    return KeywordRecord(**values)


def extract_keywords(raw_text: str) -> List[KeywordRecord]:
    """
    Turns a model answer into keyword records.

    All-or-nothing: any decode error or shape mismatch raises ResponseParseError,
    no partial salvage is attempted.
    """
    raw_text = raw_text or ""
    payload = _strip_code_fence(raw_text.strip())

    try:
        data = json.loads(payload)
    except (ValueError, RecursionError) as e:
        # JSONDecodeError is a ValueError; deeply nested arrays overflow the decoder
        logger.error("JSON parse error: %s raw=%r", e, raw_text[:2000])
        raise ResponseParseError("Errore nel parsing dei dati ricevuti dall'IA.", raw_text) from e

    if not isinstance(data, list):
        logger.error("Expected a JSON array, got %s raw=%r", type(data).__name__, raw_text[:2000])
        raise ResponseParseError("Expected a JSON array of keyword records.", raw_text)

    try:
        return [_to_record(item, i, raw_text) for i, item in enumerate(data)]
    except ResponseParseError as e:
        logger.error("Keyword record shape mismatch: %s raw=%r", e, raw_text[:2000])
        raise
