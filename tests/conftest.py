import json

import pytest

from newsdesk.cache import RequestCache
from newsdesk.core import NewsResolver
from newsdesk.exceptions import FeedUnavailable
from newsdesk.models import CandidateItem


class FakeClock:
    def __init__(self, now=1_000_000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class FakeFeedSource:
    def __init__(self, items=None, error=None):
        self.items = list(items or [])
        self.error = error
        self.calls = []

    def fetch(self, query, language=None):
        self.calls.append((query, language))
        if self.error:
            raise self.error
        return list(self.items)

    def fetch_headlines(self, url, *, limit=50, timeout_sec=10.0):
        self.calls.append((url, None))
        if self.error:
            raise self.error
        return []


def points_json(candidates, summary="Short summary."):
    return json.dumps({
        "points": [
            {"title": c.title, "summary": summary, "sourceName": "Reuters", "sourceUrl": c.link}
            for c in candidates
        ]
    })


class FakeSummarizer:
    """Echoes its candidates back as generated JSON, or raises / returns canned text."""

    def __init__(self, error=None, text=None):
        self.error = error
        self.text = text
        self.calls = []

    def summarize(self, candidates, *, language, mode, policy):
        self.calls.append({"candidates": list(candidates), "language": language, "mode": mode})
        if self.error:
            raise self.error
        if self.text is not None:
            return self.text
        return points_json(candidates)


class FakeSummarizerFactory:
    def __init__(self, summarizer):
        self.summarizer = summarizer
        self.models = []

    def __call__(self, model):
        self.models.append(model)
        return self.summarizer


def make_items(n, prefix="Headline number"):
    return [
        CandidateItem(title=f"{prefix} {i} about local technology - Source {i}", link=f"https://example.com/{i}")
        for i in range(n)
    ]


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return RequestCache(ttl_sec=1800, clock=clock)


@pytest.fixture
def feed():
    return FakeFeedSource(items=make_items(12))


@pytest.fixture
def summarizer():
    return FakeSummarizer()


@pytest.fixture
def factory(summarizer):
    return FakeSummarizerFactory(summarizer)


@pytest.fixture
def resolver(feed, cache, factory):
    return NewsResolver(feed_source=feed, cache=cache, summarizer_factory=factory, page_size=10)


@pytest.fixture
def broken_feed():
    return FakeFeedSource(error=FeedUnavailable("Feed request timed out after 5.0s"))
