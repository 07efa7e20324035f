from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Tuple

from .core import DEFAULT_LANGUAGE, NewsResolver
from .exceptions import GenerationUnavailable, InvalidRequest, NewsdeskError
from .models import Mode
from .newspapers import by_country, get_newspaper
from .summarizers import DEFAULT_MODEL

logger = logging.getLogger(__name__)

QUOTA_MESSAGE = "AI Quota Exceeded. Please wait a few minutes or switch to a different AI model."

Response = Tuple[int, Dict[str, Any]]


def handle_fetch_news(body: Mapping[str, Any], resolver: NewsResolver) -> Response:
    """Turn a request body into (status, payload); never raises."""
    region = body.get("region")
    category = body.get("category")
    if not region or not category:
        return 400, {"error": "Missing region or category"}

    exclude_titles = body.get("excludeTitles") or []
    if not isinstance(exclude_titles, (list, tuple)):
        return 400, {"error": "excludeTitles must be a list of strings"}

    try:
        result = resolver.resolve(
            str(region),
            str(category),
            mode=body.get("mode") or Mode.DETAILED,
            model=body.get("model") or DEFAULT_MODEL,
            exclude_titles=[str(t) for t in exclude_titles],
            language=body.get("language") or DEFAULT_LANGUAGE,
        )
    except InvalidRequest as e:
        return 400, {"error": str(e)}
    except GenerationUnavailable:
        logger.exception("Generation quota exhausted with no fallback")
        return 429, {"error": QUOTA_MESSAGE}
    except NewsdeskError as e:
        logger.error("fetch-news failed: %s", e)
        return e.status_code, {"error": str(e) or "Internal server error"}
    except Exception:
        logger.exception("fetch-news crashed")
        return 500, {"error": "Internal server error"}

    if result.degraded:
        logger.info("Serving fallback result for %s/%s", region, category)
    return 200, result.to_dict()


def handle_fetch_rss(body: Mapping[str, Any], resolver: NewsResolver) -> Response:
    """Fetch headlines by `rssUrl`, or by `newspaperId` from the built-in catalog."""
    rss_url = body.get("rssUrl")
    newspaper_id = body.get("newspaperId")
    if not rss_url and newspaper_id:
        newspaper = get_newspaper(str(newspaper_id))
        if newspaper is None:
            return 400, {"error": f"Unknown newspaper: {newspaper_id}"}
        rss_url = newspaper.rss_url
    if not rss_url:
        return 400, {"error": "RSS URL is required"}
    try:
        headlines = resolver.fetch_headlines(str(rss_url))
    except Exception as e:
        logger.error("RSS fetch error: %s", e)
        return 500, {"error": "Failed to fetch RSS feed", "details": str(e) or "Unknown error"}
    return 200, {"headlines": [h.to_dict() for h in headlines]}


def handle_list_newspapers(country: Optional[str] = None) -> Response:
    return 200, {"newspapers": [n.to_dict() for n in by_country(country)]}
