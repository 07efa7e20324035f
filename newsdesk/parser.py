from __future__ import annotations

from typing import Any, Dict

from .models import MAX_TITLE_CHARS, CandidateItem, Headline


def _get_title(entry: Dict[str, Any]) -> str:
    title = entry.get("title")
    if not isinstance(title, str):
        return ""
    return title.strip()


def _get_link(entry: Dict[str, Any]) -> str:
    for key in ("link", "feedburner_origlink", "id"):
        val = entry.get(key)
        if isinstance(val, str) and val.strip().startswith("http"):
            return val.strip()
    return ""


def to_candidate(entry: Dict[str, Any]) -> CandidateItem:
    """
    Map a raw feed entry (from feedparser) to a CandidateItem.

    Titles are truncated to keep the generation prompt bounded. A missing title is
    kept as "" so the exclusion filter can drop it.
    """
    return CandidateItem(
        title=_get_title(entry)[:MAX_TITLE_CHARS],
        link=_get_link(entry),
    )


def to_headline(entry: Dict[str, Any]) -> Headline:
    return Headline(
        title=_get_title(entry) or "No title",
        link=_get_link(entry) or None,
    )
