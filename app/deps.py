# app/deps.py
# Role: Shared application-level dependencies.
#       Provides the Jinja2 templates loader, the per-request database session,
#       access to Settings and object storage, and the bearer-key check used
#       by the reporting API.

"""
Shared dependencies for the study cards app.
"""

import hmac
import logging
import os
from datetime import datetime, timezone
from typing import Generator, Optional

from fastapi import Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from config import Settings
from models import StudyCard
from app.services.presentation import (
    difficulty_label,
    format_amount,
    format_file_size,
    rating_stars,
    split_tags,
    strip_html,
)
from app.services.storage import ObjectStorage

logger = logging.getLogger(__name__)

# -------------------------------------------------------------------
# Templates
# -------------------------------------------------------------------

TEMPLATES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "templates")

# Jinja2 templates loader (used by all HTML-rendering routes)
templates = Jinja2Templates(directory=TEMPLATES_DIR)

templates.env.filters["strip_html"] = strip_html
templates.env.filters["tags"] = split_tags
templates.env.filters["difficulty"] = difficulty_label
templates.env.filters["filesize"] = format_file_size
templates.env.filters["amount"] = format_amount
templates.env.filters["stars"] = rating_stars

# -------------------------------------------------------------------
# Settings, database, storage
# -------------------------------------------------------------------

def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a database session and ensures it is closed.

    Typical usage in routes:
        db: Session = Depends(get_db)
    """
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()


def get_optional_storage(request: Request) -> Optional[ObjectStorage]:
    return request.app.state.storage


def get_storage(storage: Optional[ObjectStorage] = Depends(get_optional_storage)) -> ObjectStorage:
    if storage is None:
        raise HTTPException(status_code=503, detail="Object storage is not configured")
    return storage


# -------------------------------------------------------------------
# Reporting API authentication
# -------------------------------------------------------------------

UNAUTHORIZED_MESSAGE = "Unauthorized. Invalid or missing API key."


class InvalidApiKey(Exception):
    """Missing, malformed or wrong bearer key (all reported the same way)."""


def bearer_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization") or ""
    if header.startswith("Bearer "):
        return header[len("Bearer "):]
    return None


def require_api_key(request: Request, settings: Settings = Depends(get_settings)) -> None:
    """
    Compare the bearer token with Settings.reporting_api_key.

    With no key configured the check is skipped (see main.create_app, which
    warns about this at startup).
    """
    if not settings.auth_enabled:
        logger.debug("API key check disabled, serving %s", request.url.path)
        return

    provided = bearer_token(request)
    if provided is None or not hmac.compare_digest(
        provided.encode("utf-8"), settings.reporting_api_key.encode("utf-8")
    ):
        logger.info("Rejected API request to %s: bad or missing key", request.url.path)
        raise InvalidApiKey()


# -------------------------------------------------------------------
# Lookups
# -------------------------------------------------------------------

def get_card_or_404(db: Session, card_id: int) -> StudyCard:
    card = db.get(StudyCard, card_id)
    if card is None:
        raise HTTPException(status_code=404, detail="Card not found")
    return card


# -------------------------------------------------------------------
# JSON API helpers
# -------------------------------------------------------------------

def internal_error() -> JSONResponse:
    # Never leak exception details to API callers
    return JSONResponse({"error": "Internal server error"}, status_code=500)


def generated_at() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
