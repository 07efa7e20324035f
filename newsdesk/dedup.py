from __future__ import annotations

from typing import Iterable, List, Sequence

from .models import CandidateItem

# Containment only counts when the contained title is longer than this.
MIN_FUZZY_MATCH_CHARS = 20


def clean_title(title: str) -> str:
    """Drop the " - Source" suffix many feeds append, then lower-case."""
    return title.split(" - ", 1)[0].strip().lower()


def is_excluded(title: str, exclude_titles: Sequence[str]) -> bool:
    if not title or not title.strip():
        return True
    clean = clean_title(title)
    for ex in exclude_titles:
        clean_ex = (ex or "").strip().lower()
        if clean_ex == clean:
            return True
        if len(clean) > MIN_FUZZY_MATCH_CHARS and clean in clean_ex:
            return True
        if len(clean_ex) > MIN_FUZZY_MATCH_CHARS and clean_ex in clean:
            return True
    return False


def filter_excluded(items: Iterable[CandidateItem], exclude_titles: Sequence[str]) -> List[CandidateItem]:
    """
    Remove items already shown to the caller, matching titles loosely.
    Keeps the first occurrence order of the input.
    """
    exclude = list(exclude_titles)
    return [it for it in items if not is_excluded(it.title, exclude)]
