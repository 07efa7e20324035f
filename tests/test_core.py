import json
import logging

import pytest

from newsdesk.core import NewsResolver
from newsdesk.exceptions import (
    FeedUnavailable,
    GenerationError,
    GenerationUnavailable,
    InvalidRequest,
    NoNewsFound,
)
from newsdesk.fallback import FALLBACK_SUMMARY
from newsdesk.models import CandidateItem, Mode

from .conftest import FakeFeedSource, FakeSummarizer, FakeSummarizerFactory, make_items


def test_cache_hit_skips_fetch_and_summarize(resolver, feed, summarizer):
    first = resolver.resolve("Italy", "Technology", Mode.DETAILED, "Gemini 1.5")
    second = resolver.resolve("Italy", "Technology", Mode.DETAILED, "Gemini 1.5")

    assert json.dumps(first.to_dict()) == json.dumps(second.to_dict())
    assert len(feed.calls) == 1
    assert len(summarizer.calls) == 1


def test_cache_expiry_triggers_fresh_fetch(resolver, feed, clock):
    resolver.resolve("Italy", "Technology")
    clock.advance(30 * 60)
    resolver.resolve("Italy", "Technology")
    assert len(feed.calls) == 2


def test_cache_keyed_by_language_and_model(resolver, feed):
    resolver.resolve("Italy", "Technology", language="English")
    resolver.resolve("Italy", "Technology", language="Italiano")
    resolver.resolve("Italy", "Technology", model="Gemini 2.0")
    assert len(feed.calls) == 3


def test_feed_query_and_language(resolver, feed):
    resolver.resolve("Italy", "Technology", language="Italiano")
    assert feed.calls == [("Technology Italy when:7d", "Italiano")]


def test_caps_to_page_size_and_preserves_order(resolver, summarizer):
    result = resolver.resolve("Italy", "Technology")
    assert len(summarizer.calls[0]["candidates"]) == 10
    assert result.titles() == [c.title for c in make_items(10)]
    assert not result.degraded


def test_end_to_end_pagination_is_not_cached(feed, cache, factory):
    resolver = NewsResolver(feed_source=feed, cache=cache, summarizer_factory=factory)
    exclude = [
        "Headline number 2 about local technology",
        "headline number 5 about local technology - Other outlet",
        "HEADLINE NUMBER 7 ABOUT LOCAL TECHNOLOGY",
    ]
    result = resolver.resolve("Italy", "Technology", Mode.DETAILED, "Gemini 1.5", exclude, "English")

    expected = [c.title for i, c in enumerate(make_items(12)) if i not in (2, 5, 7)]
    assert result.titles() == expected
    assert len(result) == 9
    assert len(cache) == 0


def test_initial_page_empty_after_filter_is_no_news(cache, factory):
    resolver = NewsResolver(feed_source=FakeFeedSource(items=[]), cache=cache, summarizer_factory=factory)
    with pytest.raises(NoNewsFound):
        resolver.resolve("Italy", "Technology")
    assert factory.models == []


def test_initial_page_with_only_untitled_items_is_no_news(cache, factory):
    feed = FakeFeedSource(items=[CandidateItem(title="", link="https://example.com")])
    resolver = NewsResolver(feed_source=feed, cache=cache, summarizer_factory=factory)
    with pytest.raises(NoNewsFound):
        resolver.resolve("Italy", "Technology")


def test_pagination_empty_after_filter_is_empty_success(resolver, factory):
    seen = [c.title for c in make_items(12)]
    result = resolver.resolve("Italy", "Technology", exclude_titles=seen)
    assert result.to_dict() == {"points": []}
    assert factory.models == []


def test_feed_unavailable_propagates(broken_feed, cache, factory):
    resolver = NewsResolver(feed_source=broken_feed, cache=cache, summarizer_factory=factory)
    with pytest.raises(FeedUnavailable):
        resolver.resolve("Italy", "Technology")
    assert len(cache) == 0


@pytest.mark.parametrize("summarizer", [
    FakeSummarizer(error=GenerationUnavailable("429 quota")),
    FakeSummarizer(error=GenerationError("boom")),
    FakeSummarizer(text="Sorry, I cannot help with that."),
    FakeSummarizer(text='{"points": [{"title": "only a title"}]}'),
])
def test_generation_failures_fall_back_and_cache(resolver, cache, summarizer, caplog):
    with caplog.at_level(logging.WARNING, logger="newsdesk.core"):
        result = resolver.resolve("Italy", "Technology")

    assert result.degraded
    assert len(result) == 10
    assert all(p.summary == FALLBACK_SUMMARY for p in result.points)
    assert result.titles() == [c.title for c in make_items(10)]
    assert len(cache) == 1
    assert "falling back" in caplog.text


def test_summarizer_setup_failure_falls_back(feed, cache):
    def factory(model):
        raise GenerationError("GEMINI_API_KEY not found")

    resolver = NewsResolver(feed_source=feed, cache=cache, summarizer_factory=factory)
    assert resolver.resolve("Italy", "Technology").degraded


def test_fallback_pagination_not_cached(feed, cache):
    factory = FakeSummarizerFactory(FakeSummarizer(error=GenerationError("boom")))
    resolver = NewsResolver(feed_source=feed, cache=cache, summarizer_factory=factory)
    result = resolver.resolve("Italy", "Technology", exclude_titles=["something already seen here"])
    assert result.degraded
    assert len(cache) == 0


def test_mode_language_and_model_reach_summarizer(resolver, summarizer, factory):
    resolver.resolve("Italy", "Technology", mode="Headlines Only", model="gpt-4o-mini", language="Italiano")
    assert factory.models == ["gpt-4o-mini"]
    assert summarizer.calls[0]["mode"] is Mode.HEADLINES_ONLY
    assert summarizer.calls[0]["language"] == "Italiano"


@pytest.mark.parametrize("region,category", [("", "Technology"), ("Italy", ""), (None, "Sport"), ("  ", "Sport")])
def test_missing_region_or_category(resolver, feed, region, category):
    with pytest.raises(InvalidRequest):
        resolver.resolve(region, category)
    assert feed.calls == []


def test_unknown_mode_is_invalid(resolver):
    with pytest.raises(InvalidRequest):
        resolver.resolve("Italy", "Technology", mode="Poetry")


def test_fetch_headlines_requires_url(resolver):
    with pytest.raises(InvalidRequest):
        resolver.fetch_headlines("")


def test_blank_exclusion_list_is_still_pagination(resolver, cache, feed):
    result = resolver.resolve("Italy", "Technology", exclude_titles=[""])
    assert len(result) == 10
    assert len(cache) == 0

    resolver.resolve("Italy", "Technology", exclude_titles=[""])
    assert len(feed.calls) == 2


def test_extra_generated_points_are_capped(cache):
    feed = FakeFeedSource(items=make_items(3))
    invented = json.dumps({"points": [
        {"title": f"Invented {i}", "summary": "S", "sourceName": "N", "sourceUrl": f"https://x/{i}"}
        for i in range(8)
    ]})
    factory = FakeSummarizerFactory(FakeSummarizer(text=invented))
    resolver = NewsResolver(feed_source=feed, cache=cache, summarizer_factory=factory)

    result = resolver.resolve("Italy", "Technology")
    assert result.titles() == ["Invented 0", "Invented 1", "Invented 2"]
    assert not result.degraded
