# main.py
# Role: Application entry point for the study cards app.
#       Builds the FastAPI app from Settings, creates database tables on
#       startup, mounts static assets, and registers all route modules.

"""
Main FastAPI app for the study cards tracker.

Here we only:
- configure logging
- create the engine / session factory / object storage from Settings
- create DB tables on startup
- include route modules

Run with:  uvicorn main:app --reload
"""

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config import Settings, load_settings
from db import Base, make_engine, make_session_factory
from app.deps import UNAUTHORIZED_MESSAGE, InvalidApiKey
from app.routes_root import router as root_router
from app.routes_cards import router as cards_router
from app.routes_dashboard import router as dashboard_router
from app.routes_upload import router as upload_router
from app.routes_finance import router as finance_router
from app.routes_api import router as api_router
from app.services.storage import ObjectStorage

logger = logging.getLogger(__name__)

STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "app", "static")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def create_app(settings: Optional[Settings] = None, storage: Optional[ObjectStorage] = None) -> FastAPI:
    """
    Build the app. Tests pass their own Settings (and a fake storage);
    production reads everything from the environment.
    """
    settings = settings or load_settings()
    configure_logging(settings.log_level)

    engine = make_engine(settings.database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Create database tables (only if they don't exist yet)
        Base.metadata.create_all(bind=engine)
        yield
        engine.dispose()

    app = FastAPI(title="VL Holdings Study Cards", lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    if storage is None and settings.storage_configured:
        storage = ObjectStorage(settings)
    app.state.storage = storage
    if storage is None:
        logger.info("Object storage not configured; attachment uploads are disabled")

    if not settings.auth_enabled:
        logger.warning(
            "PRESIDENT_API_KEY is not set: the reporting API under /api is OPEN "
            "and answers without authentication"
        )

    @app.exception_handler(InvalidApiKey)
    async def invalid_api_key_handler(request: Request, exc: InvalidApiKey):
        return JSONResponse({"error": UNAUTHORIZED_MESSAGE}, status_code=401)

    # Serve static files (CSS) from /static
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    # -------------------------------------------------------------------
    # Include routers
    # -------------------------------------------------------------------

    # Card grid at /
    app.include_router(root_router)

    # Card detail + create / edit / toggle / delete
    app.include_router(cards_router)

    # Editing dashboard
    app.include_router(dashboard_router)

    # Attachment upload / signed download
    app.include_router(upload_router)

    # Read-only JSON APIs for the executive dashboard
    app.include_router(finance_router)
    app.include_router(api_router)

    return app


app = create_app()
