"""
Environment-driven settings and wiring.

Values are read from the process environment after loading a local .env file, e.g.

    GEMINI_API_KEY=...
    NEWSDESK_CACHE_TTL_SEC=1800
    NEWSDESK_LOG_LEVEL=DEBUG
"""
from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from functools import partial
from typing import Optional

from dotenv import load_dotenv

from .cache import DEFAULT_TTL_SEC, RequestCache
from .core import DEFAULT_PAGE_SIZE, NewsResolver
from .fetcher import FeedSource
from .summarizers import (
    DEFAULT_GEMINI_MODEL,
    DEFAULT_OPENAI_MODEL,
    InstructionPolicy,
    SummarizeOptions,
    build_summarizer,
)

LOG_FORMAT = "[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s"


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class Settings:
    gemini_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    gemini_model: str = DEFAULT_GEMINI_MODEL
    openai_model: str = DEFAULT_OPENAI_MODEL
    generation_timeout_sec: float = 15.0
    cache_ttl_sec: float = DEFAULT_TTL_SEC
    feed_timeout_sec: float = 5.0
    page_size: int = DEFAULT_PAGE_SIZE
    log_level: str = "INFO"
    discord_token: Optional[str] = None

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY"),
            openai_api_key=os.getenv("OPENAI_API_KEY"),
            gemini_model=os.getenv("GEMINI_MODEL", DEFAULT_GEMINI_MODEL),
            openai_model=os.getenv("OPENAI_MODEL", DEFAULT_OPENAI_MODEL),
            generation_timeout_sec=_float_env("NEWSDESK_GENERATION_TIMEOUT_SEC", 15.0),
            cache_ttl_sec=_float_env("NEWSDESK_CACHE_TTL_SEC", DEFAULT_TTL_SEC),
            feed_timeout_sec=_float_env("NEWSDESK_FEED_TIMEOUT_SEC", 5.0),
            page_size=int(_float_env("NEWSDESK_PAGE_SIZE", DEFAULT_PAGE_SIZE)),
            log_level=os.getenv("NEWSDESK_LOG_LEVEL", "INFO"),
            discord_token=os.getenv("DISCORD_BOT_TOKEN"),
        )

    def summarize_options(self) -> SummarizeOptions:
        return SummarizeOptions(
            gemini_api_key=self.gemini_api_key,
            openai_api_key=self.openai_api_key,
            gemini_model=self.gemini_model,
            openai_model=self.openai_model,
            timeout_sec=self.generation_timeout_sec,
        )


def setup_logging(level: str = "INFO") -> None:
    """Configure a single console handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(handler)
    # Keep per-request HTTP lines out of INFO output.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def build_resolver(
    settings: Optional[Settings] = None,
    *,
    cache: Optional[RequestCache] = None,
    policy: Optional[InstructionPolicy] = None,
) -> NewsResolver:
    settings = settings or Settings.from_env()
    return NewsResolver(
        feed_source=FeedSource(timeout_sec=settings.feed_timeout_sec),
        cache=cache if cache is not None else RequestCache(ttl_sec=settings.cache_ttl_sec),
        summarizer_factory=partial(build_summarizer, options=settings.summarize_options()),
        policy=policy,
        page_size=settings.page_size,
    )
