# app/routes_dashboard.py

from typing import Any, Dict, Optional

from fastapi import APIRouter, Request, Depends, Query
from fastapi.responses import HTMLResponse
from sqlalchemy.orm import Session

from .deps import templates, get_db
from app.services.card_helpers import parse_optional_int
from app.services.finance import completion_rate, count_cards
from models import StudyCard

router = APIRouter()


def dashboard_context(
    db: Session,
    editing: Optional[StudyCard] = None,
    error: Optional[str] = None,
) -> Dict[str, Any]:
    cards = (
        db.query(StudyCard)
        .order_by(StudyCard.created_at.desc(), StudyCard.id.desc())
        .all()
    )
    total_items, total_completed = count_cards(db)

    return {
        "cards": cards,
        "editing": editing,
        "error": error,
        "total_items": total_items,
        "total_completed": total_completed,
        "completion_rate": completion_rate(total_items, total_completed),
    }


@router.get("/dashboard", response_class=HTMLResponse)
def dashboard_page(
    request: Request,
    edit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Editing page: new-card form (or the form for ?edit=<id>) plus every card
    with toggle / delete buttons.
    """
    edit_id = parse_optional_int(edit)
    editing = db.get(StudyCard, edit_id) if edit_id is not None else None

    return templates.TemplateResponse(
        request,
        "dashboard.html",
        dashboard_context(db, editing=editing),
    )
