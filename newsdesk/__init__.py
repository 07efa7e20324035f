"""
newsdesk

Resolves a (region, category, mode, model, language) request into a short list of
AI-summarized news points built from a live Google News RSS search.

Core ideas:
- Input: region, category, display mode, model label, language, titles already shown
- Process: cache → fetch feed → exclude seen titles → summarize → normalize → cache
- Output: ResultSet of NewsPoint (title, summary, sourceName, sourceUrl)

If summarization fails or returns garbage, the raw feed headlines are returned
instead, so a request with feed data never fails because of the model.

Example
-------
from newsdesk import NewsResolver, RequestCache

resolver = NewsResolver(cache=RequestCache(ttl_sec=1800))
first = resolver.resolve("Italy", "Technology", model="Gemini 1.5", language="Italiano")
more = resolver.resolve(
    "Italy", "Technology", model="Gemini 1.5", language="Italiano",
    exclude_titles=first.titles(),
)

for point in first.points + more.points:
    print(point.source_name, point.title)
"""
from .cache import RequestCache
from .core import NewsResolver
from .exceptions import (
    FeedUnavailable,
    GenerationError,
    GenerationUnavailable,
    InvalidRequest,
    MalformedGenerationOutput,
    NewsdeskError,
    NoNewsFound,
)
from .fetcher import FeedSource
from .models import CandidateItem, Headline, Mode, NewsPoint, RequestKey, ResultSet
from .newspapers import NEWSPAPERS, Newspaper
from .session import FeedSession, PageLimits
from .summarizers import InstructionPolicy, SummarizeOptions

__all__ = [
    "CandidateItem",
    "FeedSession",
    "FeedSource",
    "FeedUnavailable",
    "GenerationError",
    "GenerationUnavailable",
    "Headline",
    "InstructionPolicy",
    "InvalidRequest",
    "MalformedGenerationOutput",
    "Mode",
    "NEWSPAPERS",
    "NewsPoint",
    "Newspaper",
    "NewsResolver",
    "NewsdeskError",
    "NoNewsFound",
    "PageLimits",
    "RequestCache",
    "RequestKey",
    "ResultSet",
    "SummarizeOptions",
]
