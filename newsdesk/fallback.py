from __future__ import annotations

from typing import Iterable

from .models import CandidateItem, NewsPoint, ResultSet

FALLBACK_TITLE = "News Update"
FALLBACK_SUMMARY = "Click to read the full story from the source."
FALLBACK_SOURCE_NAME = "RSS Feed"
FALLBACK_SOURCE_URL = "#"


def synthesize(candidates: Iterable[CandidateItem]) -> ResultSet:
    """Build a degraded but well-formed ResultSet straight from feed items."""
    points = tuple(
        NewsPoint(
            title=(c.title or "").strip() or FALLBACK_TITLE,
            summary=FALLBACK_SUMMARY,
            source_name=FALLBACK_SOURCE_NAME,
            source_url=(c.link or "").strip() or FALLBACK_SOURCE_URL,
        )
        for c in candidates
    )
    return ResultSet(points=points, degraded=True)
