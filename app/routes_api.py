# app/routes_api.py
"""
Read-only study cards API for the executive dashboard.

Query params:
  - category: exact category filter
  - search:   case-insensitive match in title or description
  - limit:    max number of cards (default 50, at most 100)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from models import StudyCard
from app.deps import generated_at, get_db, internal_error, require_api_key
from app.services.card_helpers import clean_text, parse_int_param, serialize_card

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", dependencies=[Depends(require_api_key)])

DEFAULT_LIMIT = 50
MAX_LIMIT = 100


@router.get("/study-cards")
def list_study_cards(
    category: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    category = clean_text(category)
    search = clean_text(search)
    limit_val = max(0, min(parse_int_param(limit, DEFAULT_LIMIT), MAX_LIMIT))

    try:
        query = db.query(StudyCard)

        if category:
            query = query.filter(StudyCard.category == category)

        if search:
            pattern = f"%{search}%"
            query = query.filter(
                or_(
                    StudyCard.title.ilike(pattern),
                    StudyCard.description.ilike(pattern),
                )
            )

        cards = (
            query.order_by(StudyCard.created_at.desc(), StudyCard.id.desc())
            .limit(limit_val)
            .all()
        )

        # Distinct categories (group-by) for the consumer's filter dropdown
        category_rows = (
            db.query(StudyCard.category)
            .filter(StudyCard.category.isnot(None))
            .group_by(StudyCard.category)
            .order_by(StudyCard.category)
            .all()
        )
        categories = [row[0] for row in category_rows if row[0]]

        total = db.query(func.count(StudyCard.id)).scalar() or 0
    except Exception:
        logger.exception("Study cards listing failed")
        return internal_error()

    return {
        "cards": [serialize_card(card) for card in cards],
        "categories": categories,
        "total": int(total),
        "generatedAt": generated_at(),
    }
