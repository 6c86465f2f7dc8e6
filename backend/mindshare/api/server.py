"""FastAPI server exposing the rank check."""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from mindshare import __version__
from mindshare.aggregator import TimeframeAggregator
from mindshare.checker import RankChecker
from mindshare.config import Settings, get_settings
from mindshare.exceptions import ValidationError
from mindshare.services.leaderboard import LeaderboardClient
from mindshare.storage import SnapshotCache

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the app. One client, cache and aggregator live for its lifetime."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = LeaderboardClient(settings.leaderboard_api_config(), transport=transport)
        async with client:
            aggregator = TimeframeAggregator(
                fetcher=client,
                cache=SnapshotCache(ttl_seconds=settings.cache_ttl_seconds),
                max_pages=settings.max_pages,
                page_size_hint=settings.page_size_hint,
            )
            app.state.checker = RankChecker(aggregator)
            logger.info(f"Mindshare API ready (upstream={settings.upstream_base_url})")
            yield
        logger.info("Shutting down Mindshare API")

    app = FastAPI(title="Mindshare Rank Checker", version=__version__, lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    @app.get("/api/check")
    async def check(request: Request, username: str | None = None):
        """Rank and rank-100 gap for a username across every timeframe."""
        checker: RankChecker = request.app.state.checker
        try:
            response = await checker.check(username)
        except ValidationError as e:
            return JSONResponse(status_code=e.status_code, content={"error": str(e)})
        except Exception as e:
            logger.error(f"API error: {e}", exc_info=True)
            return JSONResponse(status_code=500, content={"error": str(e)})
        return response.to_api()

    @app.get("/api/health")
    async def health():
        return {"ok": True}

    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="static")

    return app
