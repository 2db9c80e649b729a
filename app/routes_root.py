# routes_root.py
"""
Root / landing page: every study card, newest first.
"""

from datetime import datetime

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from models import StudyCard
from app.deps import get_db, templates
from app.services.presentation import youtube_embed_url

router = APIRouter()


@router.get("/", response_class=HTMLResponse)
def index_page(request: Request, db: Session = Depends(get_db)):
    """
    Card grid. Cards with no cover image show their YouTube video instead.
    """
    cards = (
        db.query(StudyCard)
        .order_by(StudyCard.created_at.desc(), StudyCard.id.desc())
        .all()
    )

    embeds = {card.id: youtube_embed_url(card.youtube_url) for card in cards}

    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "cards": cards,
            "embeds": embeds,
            "rendered_at": datetime.now().strftime("%Y-%m-%d %H:%M:%S"),
        },
    )


@router.get("/health")
def health():
    """
    Simple health check endpoint.
    """
    return {"message": "Study cards app is running"}
