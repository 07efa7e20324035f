import pytest

from newsdesk.core import NewsResolver
from newsdesk.exceptions import NoNewsFound
from newsdesk.models import Mode
from newsdesk.session import FeedSession, PageLimits

from .conftest import FakeFeedSource, make_items


def _resolver(feed, cache, factory, page_size=10):
    return NewsResolver(feed_source=feed, cache=cache, summarizer_factory=factory, page_size=page_size)


def test_detailed_ceiling_stops_after_first_page(resolver, feed):
    session = FeedSession(resolver, "Italy", "Technology")
    assert len(session.first_page()) == 10
    assert not session.has_more
    assert session.next_page() == []
    assert len(feed.calls) == 1


def test_headlines_mode_pages_until_feed_exhausted(cache, factory):
    feed = FakeFeedSource(items=make_items(25))
    session = FeedSession(_resolver(feed, cache, factory), "Italy", "Technology", mode=Mode.HEADLINES_ONLY,
                          limits=PageLimits(exclude_window=50))

    session.first_page()
    session.next_page()
    last = session.next_page()
    assert len(last) == 5
    assert session.has_more
    assert session.next_page() == []
    assert not session.has_more
    assert [p.title for p in session.points] == [c.title for c in make_items(25)]


def test_exclude_window_sends_recent_titles_only(cache, factory):
    class RecordingResolver(NewsResolver):
        def resolve(self, *args, **kwargs):
            self.last_exclude = list(kwargs["exclude_titles"])
            return super().resolve(*args, **kwargs)

    feed = FakeFeedSource(items=make_items(40))
    resolver = RecordingResolver(feed_source=feed, cache=cache, summarizer_factory=factory)
    session = FeedSession(resolver, "Italy", "Technology", mode=Mode.HEADLINES_ONLY,
                          limits=PageLimits(exclude_window=20))
    session.first_page()
    session.next_page()
    session.next_page()

    assert len(resolver.last_exclude) == 20
    assert resolver.last_exclude == [p.title for p in session.points[-30:-10]]


def test_page_trimmed_to_ceiling(cache, factory):
    feed = FakeFeedSource(items=make_items(30))
    session = FeedSession(_resolver(feed, cache, factory), "Italy", "Technology",
                          mode=Mode.HEADLINES_ONLY, limits=PageLimits(headlines_only=15))
    session.first_page()
    assert len(session.next_page()) == 5
    assert len(session.points) == 15
    assert not session.has_more


def test_first_page_errors_propagate(cache, factory):
    session = FeedSession(_resolver(FakeFeedSource(items=[]), cache, factory), "Italy", "Technology")
    with pytest.raises(NoNewsFound):
        session.first_page()


def test_headlines_paging_never_repeats_titles(cache, factory):
    feed = FakeFeedSource(items=make_items(50))
    session = FeedSession(_resolver(feed, cache, factory), "Italy", "Technology", mode=Mode.HEADLINES_ONLY)

    session.first_page()
    while session.has_more:
        session.next_page()

    titles = [p.title for p in session.points]
    assert len(titles) == len(set(titles))
    assert len(titles) >= 30


def test_page_of_only_repeats_exhausts_session(resolver):
    class RepeatingResolver:
        def __init__(self):
            self.calls = 0

        def resolve(self, *args, **kwargs):
            self.calls += 1
            return resolver.resolve("Italy", "Technology")

    repeating = RepeatingResolver()
    session = FeedSession(repeating, "Italy", "Technology", mode=Mode.HEADLINES_ONLY)
    session.first_page()
    assert session.next_page() == []
    assert not session.has_more
    assert len(session.points) == 10


def test_partial_repeats_keep_only_new_points(cache, factory):
    feed = FakeFeedSource(items=make_items(15))
    inner = _resolver(feed, cache, factory)

    class MixedResolver:
        def resolve(self, *args, **kwargs):
            if not kwargs["exclude_titles"]:
                return inner.resolve("Italy", "Technology")
            # Ignores the exclusions and returns the full feed again.
            return NewsResolver(feed_source=FakeFeedSource(items=make_items(15)), cache=None,
                                summarizer_factory=factory, page_size=15).resolve("Italy", "Technology")

    session = FeedSession(MixedResolver(), "Italy", "Technology", mode=Mode.HEADLINES_ONLY)
    session.first_page()
    page = session.next_page()
    assert [p.title for p in page] == [c.title for c in make_items(15)][10:]
