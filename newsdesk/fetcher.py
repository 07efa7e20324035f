from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote_plus

import feedparser
import httpx

from .exceptions import FeedUnavailable
from .models import CandidateItem, Headline
from .parser import to_candidate, to_headline

logger = logging.getLogger(__name__)

GOOGLE_NEWS_SEARCH_URL = "https://news.google.com/rss/search"
USER_AGENT = "Mozilla/5.0 (compatible; NewsdeskBot/1.0)"

_LANGUAGE_CODES = {
    "english": "en",
    "italiano": "it",
    "italian": "it",
    "deutsch": "de",
    "german": "de",
    "español": "es",
    "espanol": "es",
    "spanish": "es",
    "français": "fr",
    "francais": "fr",
    "french": "fr",
}


def language_code(language: Optional[str]) -> str:
    """Map a display language ("Italiano") or an ISO code ("it") to a feed `hl` code."""
    text = (language or "").strip().lower()
    if text in _LANGUAGE_CODES:
        return _LANGUAGE_CODES[text]
    if text in _LANGUAGE_CODES.values():
        return text
    return "en"


def build_query(region: str, category: str, window: str = "7d") -> str:
    return f"{category} {region} when:{window}"


def build_feed_url(query: str, language: Optional[str], base_url: str = GOOGLE_NEWS_SEARCH_URL) -> str:
    hl = language_code(language)
    gl = hl.upper()
    return f"{base_url}?q={quote_plus(query)}&hl={hl}&gl={gl}&ceid={gl}:{hl}"


class FeedSource:
    """
    Fetches a bounded list of raw candidates from Google News RSS search.

    The HTTP request carries its own timeout; feedparser only parses the body, so a
    slow source can never hold a resolution longer than `timeout_sec`.
    """

    def __init__(
        self,
        *,
        timeout_sec: float = 5.0,
        max_items: int = 50,
        base_url: str = GOOGLE_NEWS_SEARCH_URL,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self.timeout_sec = timeout_sec
        self.max_items = max_items
        self.base_url = base_url
        self._client = client

    def fetch(self, query: str, language: Optional[str] = None) -> List[CandidateItem]:
        url = build_feed_url(query, language, self.base_url)
        entries = self.fetch_entries(url, timeout_sec=self.timeout_sec)
        return [to_candidate(e) for e in entries[: self.max_items]]

    def fetch_headlines(self, url: str, *, limit: int = 50, timeout_sec: float = 10.0) -> List[Headline]:
        entries = self.fetch_entries(url, timeout_sec=timeout_sec)
        return [to_headline(e) for e in entries[:limit]]

    def fetch_entries(self, url: str, *, timeout_sec: float) -> List[Dict[str, Any]]:
        """
        Fetch a single feed URL and return its entries.

        Raises FeedUnavailable on timeout, network/HTTP errors, or when the feed is
        malformed (bozo) and yields no entries.
        """
        try:
            body = self._get(url, timeout_sec)
        except httpx.TimeoutException as e:
            raise FeedUnavailable(f"Feed request timed out after {timeout_sec}s: {url}") from e
        except httpx.HTTPError as e:
            raise FeedUnavailable(f"Failed to fetch feed: {url} ({e})") from e

        feed = feedparser.parse(body)
        entries = getattr(feed, "entries", None)
        if not isinstance(entries, list):
            raise FeedUnavailable(f"Feed has no entries: {url}")

        if getattr(feed, "bozo", 0) and not entries:
            exc = getattr(feed, "bozo_exception", None)
            msg = f"Invalid RSS/Atom feed: {url}"
            if exc:
                msg += f" ({exc})"
            raise FeedUnavailable(msg)

        logger.debug("Fetched %d entries from %s", len(entries), url)
        return entries

    def _get(self, url: str, timeout_sec: float) -> bytes:
        headers = {"User-Agent": USER_AGENT}
        if self._client is not None:
            resp = self._client.get(url, headers=headers, timeout=timeout_sec, follow_redirects=True)
        else:
            resp = httpx.get(url, headers=headers, timeout=timeout_sec, follow_redirects=True)
        resp.raise_for_status()
        return resp.content
