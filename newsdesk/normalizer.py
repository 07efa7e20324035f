from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from .exceptions import MalformedGenerationOutput
from .models import NewsPoint, ResultSet

logger = logging.getLogger(__name__)

# Probed in order; models sometimes rename the array.
POINT_KEYS: Sequence[str] = ("points", "articles", "news", "items")

FIELD_ALIASES: Dict[str, Sequence[str]] = {
    "title": ("title", "headline"),
    "summary": ("summary", "description"),
    "source_name": ("sourceName", "source_name", "source"),
    "source_url": ("sourceUrl", "source_url", "url", "link"),
}

_FENCE_OPEN = re.compile(r"^```[\w-]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")
_SNIPPET_CHARS = 50


def strip_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = _FENCE_OPEN.sub("", text, count=1)
        text = _FENCE_CLOSE.sub("", text, count=1)
    return text


def extract_object(text: str) -> str:
    """Slice from the first "{" to the last "}" to drop any preamble or postamble."""
    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last > first:
        return text[first:last + 1].strip()
    return text.strip()


def find_points(data: Any) -> Optional[List[Any]]:
    if not isinstance(data, dict):
        return None
    for key in POINT_KEYS:
        val = data.get(key)
        if isinstance(val, list):
            return val
    return None


def _field(raw: Dict[str, Any], name: str) -> str:
    for alias in FIELD_ALIASES[name]:
        val = raw.get(alias)
        if val is None:
            continue
        if isinstance(val, dict):
            # e.g. "source": {"name": ..., "url": ...}
            val = val.get("name") or val.get("title") or ""
        text = str(val).strip()
        if text:
            return text
    return ""


def to_news_point(raw: Any) -> Optional[NewsPoint]:
    if not isinstance(raw, dict):
        return None
    point = NewsPoint(
        title=_field(raw, "title"),
        summary=_field(raw, "summary"),
        source_name=_field(raw, "source_name"),
        source_url=_field(raw, "source_url"),
    )
    return point if point.is_complete() else None


def normalize(raw_text: str) -> ResultSet:
    """
    Coerce generated text into a ResultSet.

    Tolerates markdown fences, text around the JSON object, and synonym keys for
    the item array. Anything that is not a JSON object holding an array raises
    MalformedGenerationOutput. Items missing any of the four fields are dropped.
    """
    cleaned = extract_object(strip_fences(raw_text or ""))
    try:
        data = json.loads(cleaned)
    except ValueError as e:
        raise MalformedGenerationOutput(
            "Failed to parse AI response as valid JSON. Raw: " + cleaned[:_SNIPPET_CHARS] + "..."
        ) from e

    raw_points = find_points(data)
    if raw_points is None:
        raise MalformedGenerationOutput("Invalid structure: missing 'points' array")

    points = []
    for raw in raw_points:
        point = to_news_point(raw)
        if point is None:
            logger.debug("Dropping incomplete generated item: %r", raw)
            continue
        points.append(point)
    return ResultSet(points=tuple(points))
