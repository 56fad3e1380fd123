"""FastAPI application factory."""

import asyncio
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from talentscout.api.career import router as career_router
from talentscout.config import Settings
from talentscout.core.engine import CareerEngine
from talentscout.core.errors import StateInvariantError

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create and configure the talentscout FastAPI application."""
    settings = settings or Settings()

    logging.basicConfig(
        level=getattr(logging, settings.talentscout_log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Talentscout",
        version="0.1.0",
        description="Career simulation core for a football talent scout",
        docs_url="/docs" if settings.talentscout_env != "production" else None,
    )
    app.state.settings = settings
    app.state.engine = CareerEngine.from_settings(settings)
    app.state.engine_lock = asyncio.Lock()
    logger.info(
        "career_started seed=%d scout=%s",
        settings.talentscout_seed,
        settings.talentscout_scout_name,
    )

    @app.exception_handler(StateInvariantError)
    async def state_invariant_handler(request: Request, exc: StateInvariantError) -> JSONResponse:
        logger.exception("state_invariant_violation path=%s", request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": str(exc)})

    app.include_router(career_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.talentscout_env}

    return app


app = create_app()
