from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional

from .core import DEFAULT_LANGUAGE, NewsResolver
from .dedup import is_excluded
from .models import Mode, NewsPoint
from .summarizers import DEFAULT_MODEL


@dataclass
class PageLimits:
    detailed: int = 10
    headlines_only: int = 50
    # Only the most recent titles are sent back, to bound prompt size.
    exclude_window: int = 20

    def ceiling(self, mode: Mode) -> int:
        return self.headlines_only if mode is Mode.HEADLINES_ONLY else self.detailed


class FeedSession:
    """
    Caller-side "load more" bookkeeping for one (region, category, mode, model, language).

    The resolver only answers "up to N fresh items excluding these titles"; this class
    accumulates pages, enforces the per-mode ceiling and decides when to stop asking.
    """

    def __init__(
        self,
        resolver: NewsResolver,
        region: str,
        category: str,
        *,
        mode: Mode = Mode.DETAILED,
        model: str = DEFAULT_MODEL,
        language: str = DEFAULT_LANGUAGE,
        limits: Optional[PageLimits] = None,
    ) -> None:
        self.resolver = resolver
        self.region = region
        self.category = category
        self.mode = Mode.parse(mode)
        self.model = model
        self.language = language
        self.limits = limits or PageLimits()
        self.points: List[NewsPoint] = []
        self._exhausted = False

    @property
    def ceiling(self) -> int:
        return self.limits.ceiling(self.mode)

    @property
    def has_more(self) -> bool:
        return not self._exhausted and len(self.points) < self.ceiling

    def first_page(self) -> List[NewsPoint]:
        self.points = []
        self._exhausted = False
        return self._load(exclude_titles=[])

    def next_page(self) -> List[NewsPoint]:
        if not self.points:
            return self.first_page()
        if not self.has_more:
            return []
        recent = [p.title for p in self.points][-self.limits.exclude_window:]
        return self._load(exclude_titles=recent)

    def _load(self, exclude_titles: List[str]) -> List[NewsPoint]:
        result = self.resolver.resolve(
            self.region,
            self.category,
            mode=self.mode,
            model=self.model,
            exclude_titles=exclude_titles,
            language=self.language,
        )
        # Titles older than the exclusion window can come back from the resolver.
        seen = [p.title for p in self.points]
        fresh = [p for p in result.points if not is_excluded(p.title, seen)]
        room = self.ceiling - len(self.points)
        page = fresh[:room]
        if not page:
            self._exhausted = True
        self.points.extend(page)
        return page
