from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence, Union

from .cache import RequestCache
from .dedup import filter_excluded
from .exceptions import (
    GenerationError,
    GenerationUnavailable,
    InvalidRequest,
    MalformedGenerationOutput,
    NoNewsFound,
)
from .fallback import synthesize
from .fetcher import FeedSource, build_query
from .models import CandidateItem, Headline, Mode, RequestKey, ResultSet
from .normalizer import normalize
from .summarizers import DEFAULT_MODEL, InstructionPolicy, Summarizer, build_summarizer

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "English"
DEFAULT_PAGE_SIZE = 10


class NewsResolver:
    """
    High-level API: resolve a request into a ResultSet of summarized news points.

    Pipeline: cache → fetch → exclude → summarize → normalize → cache,
    falling back to raw feed items whenever generation fails or is unusable.
    Only initial pages (no exclusions) are read from or written to the cache.
    """

    def __init__(
        self,
        *,
        feed_source: Optional[FeedSource] = None,
        cache: Optional[RequestCache] = None,
        summarizer_factory: Callable[[str], Summarizer] = build_summarizer,
        policy: Optional[InstructionPolicy] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> None:
        self.feed_source = feed_source or FeedSource()
        self.cache = cache if cache is not None else RequestCache()
        self.summarizer_factory = summarizer_factory
        self.policy = policy or InstructionPolicy()
        self.page_size = page_size

    def resolve(
        self,
        region: str,
        category: str,
        mode: Union[Mode, str] = Mode.DETAILED,
        model: str = DEFAULT_MODEL,
        exclude_titles: Sequence[str] = (),
        language: str = DEFAULT_LANGUAGE,
    ) -> ResultSet:
        region = (region or "").strip()
        category = (category or "").strip()
        if not region or not category:
            raise InvalidRequest("Missing region or category")

        key = RequestKey(
            region=region,
            category=category,
            mode=Mode.parse(mode),
            model=model or DEFAULT_MODEL,
            language=language or DEFAULT_LANGUAGE,
        )
        exclude_titles = list(exclude_titles or [])
        is_initial_page = not exclude_titles
        exclude = [t for t in exclude_titles if t]

        if is_initial_page:
            cached = self.cache.get(key)
            if cached is not None:
                logger.info("[Cache Hit] %s", key.as_string())
                return cached

        # FeedUnavailable propagates: there is nothing to fall back onto.
        fetched = self.feed_source.fetch(build_query(key.region, key.category), key.language)
        candidates = filter_excluded(fetched, exclude)[: self.page_size]
        logger.info(
            "%s: fetched %d, %d after excluding %d seen titles",
            key.as_string(), len(fetched), len(candidates), len(exclude),
        )

        if not candidates:
            if is_initial_page:
                raise NoNewsFound(f"No recent news found for {key.category} in {key.region}.")
            return ResultSet()

        result = self._summarize(key, candidates)

        if is_initial_page:
            self.cache.put(key, result)
        return result

    def _summarize(self, key: RequestKey, candidates: List[CandidateItem]) -> ResultSet:
        try:
            summarizer = self.summarizer_factory(key.model)
            raw = summarizer.summarize(candidates, language=key.language, mode=key.mode, policy=self.policy)
            result = normalize(raw)
            if not result.points:
                raise MalformedGenerationOutput("Generated result has no complete items")
            # A page never holds more points than the candidates it was built from.
            result = ResultSet(points=result.points[: len(candidates)])
        except GenerationUnavailable as e:
            logger.warning("%s: generation quota exhausted, falling back to raw feed: %s", key.as_string(), e)
            return synthesize(candidates)
        except (GenerationError, MalformedGenerationOutput) as e:
            logger.warning("%s: generation failed, falling back to raw feed: %s", key.as_string(), e)
            return synthesize(candidates)
        return result

    def fetch_headlines(self, rss_url: str, *, limit: int = 50) -> List[Headline]:
        """Fetch raw headlines from an arbitrary RSS/Atom feed URL, unsummarized and uncached."""
        if not rss_url or not rss_url.strip():
            raise InvalidRequest("RSS URL is required")
        logger.info("Fetching RSS from: %s", rss_url)
        headlines = self.feed_source.fetch_headlines(rss_url.strip(), limit=limit)
        logger.info("Successfully fetched %d headlines", len(headlines))
        return headlines
