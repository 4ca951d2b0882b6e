"""Response Evaluator — FastAPI application factory."""

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from response_evaluator.application.services.verdict_cache import VerdictCache
from response_evaluator.config import Settings, settings
from response_evaluator.infrastructure.api.dependencies import build_services
from response_evaluator.infrastructure.api.routes_dynamic_app import router as dynamic_app_router
from response_evaluator.infrastructure.api.routes_health import router as health_router

logger = logging.getLogger(__name__)


async def _evict_periodically(cache: VerdictCache, interval: float) -> None:
    while True:
        await asyncio.sleep(interval)
        try:
            cache.evict_expired()
        except Exception:
            logger.exception("Cache eviction pass failed")


def create_app(config: Settings | None = None, **overrides) -> FastAPI:
    """Build the app; *overrides* are passed to build_services (tests inject fakes)."""
    config = config or settings
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s | %(message)s",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        eviction = asyncio.create_task(
            _evict_periodically(app.state.verdict_cache, config.cache_eviction_interval_seconds)
        )
        logger.info(
            "Response Evaluator ready (timeout=%.1fs, retention=%dd)",
            config.evaluation_timeout_seconds, config.cache_retention_days,
        )
        yield
        await app.state.evaluate_uc.drain(timeout=config.evaluation_timeout_seconds)
        eviction.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await eviction

    app = FastAPI(
        title="Response Evaluator",
        description="Help Scout sidebar that scores the latest team reply",
        version="0.1.0",
        debug=config.debug,
        lifespan=lifespan,
    )

    cache, use_case, renderer = build_services(config, **overrides)
    app.state.settings = config
    app.state.verdict_cache = cache
    app.state.evaluate_uc = use_case
    app.state.renderer = renderer

    # Register routers
    app.include_router(health_router)
    app.include_router(dynamic_app_router)

    return app


app = create_app()
