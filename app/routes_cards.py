# routes_cards.py
"""
Routes for a single study card: detail page and the create / edit /
toggle / delete form posts coming from the dashboard.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from models import StudyCard
from app.deps import get_card_or_404, get_db, get_optional_storage, templates
from app.routes_dashboard import dashboard_context
from app.services.attachments import split_card_attachments, stored_keys
from app.services.card_helpers import CardFormError, apply_card_form, build_card_from_form
from app.services.presentation import youtube_embed_url
from app.services.storage import ObjectStorage

logger = logging.getLogger(__name__)

router = APIRouter()


def save_failed_page(message: str) -> HTMLResponse:
    return HTMLResponse(
        f"""
        <html>
        <body style="font-family:sans-serif; padding:20px;">
            <h1>{message}</h1>
            <p>The change was not saved. Check the server log for details.</p>
            <a href="/dashboard">Back to dashboard</a>
        </body>
        </html>
        """,
        status_code=500,
    )


def form_error_page(request: Request, db: Session, error: str, card: Optional[StudyCard] = None):
    # Re-render the dashboard with the message and a 400 status
    return templates.TemplateResponse(
        request,
        "dashboard.html",
        dashboard_context(db, editing=card, error=error),
        status_code=400,
    )


# -------------------------------------------------------------------
# Detail page
# -------------------------------------------------------------------

@router.get("/cards/{card_id}", response_class=HTMLResponse)
def card_detail_page(request: Request, card_id: int, db: Session = Depends(get_db)):
    card = get_card_or_404(db, card_id)
    gallery, files = split_card_attachments(card)

    return templates.TemplateResponse(
        request,
        "card_detail.html",
        {
            "card": card,
            "gallery": gallery,
            "files": files,
            "embed_url": youtube_embed_url(card.youtube_url),
        },
    )


# -------------------------------------------------------------------
# Create / edit / toggle / delete
# -------------------------------------------------------------------

@router.post("/cards")
async def create_card(request: Request, db: Session = Depends(get_db)):
    form = await request.form()

    try:
        card = build_card_from_form(form)
    except CardFormError as e:
        return form_error_page(request, db, str(e))

    try:
        db.add(card)
        db.commit()
        db.refresh(card)
    except Exception:
        db.rollback()
        logger.exception("Creating card %r failed", form.get("title"))
        return save_failed_page("Error while creating card")

    logger.info("Created card #%s %r", card.id, card.title)
    return RedirectResponse(url=f"/cards/{card.id}", status_code=303)


@router.post("/cards/{card_id}/edit")
async def edit_card(request: Request, card_id: int, db: Session = Depends(get_db)):
    card = get_card_or_404(db, card_id)
    form = await request.form()

    try:
        apply_card_form(card, form)
    except CardFormError as e:
        db.rollback()
        return form_error_page(request, db, str(e), card=db.get(StudyCard, card_id))

    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Updating card #%s failed", card_id)
        return save_failed_page("Error while saving card")

    return RedirectResponse(url=f"/cards/{card_id}", status_code=303)


@router.post("/cards/{card_id}/toggle")
def toggle_card(card_id: int, db: Session = Depends(get_db)):
    card = get_card_or_404(db, card_id)
    card.is_completed = not card.is_completed

    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Toggling card #%s failed", card_id)
        return save_failed_page("Error while saving card")

    return RedirectResponse(url="/dashboard", status_code=303)


@router.post("/cards/{card_id}/delete")
def delete_card(
    card_id: int,
    db: Session = Depends(get_db),
    storage: Optional[ObjectStorage] = Depends(get_optional_storage),
):
    """
    Delete the row first, then (best effort) the files it pointed to.
    """
    card = get_card_or_404(db, card_id)
    keys = stored_keys(card)

    try:
        db.delete(card)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Deleting card #%s failed", card_id)
        return save_failed_page("Error while deleting card")

    if storage is not None:
        for key in keys:
            try:
                storage.delete(key)
            except Exception:
                # Row is already gone; an orphaned object is harmless
                logger.warning("Could not delete object %s of card #%s", key, card_id, exc_info=True)

    return RedirectResponse(url="/dashboard", status_code=303)
