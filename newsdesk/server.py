"""
HTTP surface for the resolver.

Run with: uvicorn newsdesk.server:app
"""
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .api import handle_fetch_news, handle_fetch_rss, handle_list_newspapers
from .config import Settings, build_resolver, setup_logging
from .core import NewsResolver

RSS_CACHE_CONTROL = "public, max-age=1800, s-maxage=1800"

router = APIRouter()


# Fields stay loosely typed; the handlers validate and answer with {"error": ...}.
class FetchNewsRequest(BaseModel):
    region: Any = None
    category: Any = None
    mode: Any = None
    model: Any = None
    excludeTitles: Any = None
    language: Any = None


class FetchRSSRequest(BaseModel):
    rssUrl: Any = None
    newspaperId: Any = None


def _resolver(request: Request) -> NewsResolver:
    return request.app.state.resolver


# Plain `def` routes run in FastAPI's threadpool, so resolutions proceed in parallel.
@router.post("/fetch-news")
def fetch_news(body: FetchNewsRequest, request: Request):
    status, payload = handle_fetch_news(body.model_dump(), _resolver(request))
    return JSONResponse(status_code=status, content=payload)


@router.post("/fetch-rss")
def fetch_rss(body: FetchRSSRequest, request: Request):
    status, payload = handle_fetch_rss(body.model_dump(), _resolver(request))
    headers = {"Cache-Control": RSS_CACHE_CONTROL} if status == 200 else None
    return JSONResponse(status_code=status, content=payload, headers=headers)


@router.get("/newspapers")
def list_newspapers(country: Optional[str] = None):
    status, payload = handle_list_newspapers(country)
    return JSONResponse(status_code=status, content=payload)


async def invalid_body(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def create_app(settings: Optional[Settings] = None, resolver: Optional[NewsResolver] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    app = FastAPI(title="Newsdesk API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type"],
    )
    app.add_exception_handler(RequestValidationError, invalid_body)
    app.state.resolver = resolver or build_resolver(settings)
    app.include_router(router)
    return app


app = create_app()
