# app/services/card_helpers.py
#
# Card Helper Functions
# Converts submitted form fields into StudyCard ORM objects, parses loose
# query/form values, and serializes cards for the JSON API.

from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional

from models import StudyCard
from app.services.presentation import DIFFICULTIES


class CardFormError(ValueError):
    """Submitted card form is missing or has invalid values."""


# ---- Field Parsing ----

def clean_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def parse_optional_float(value: Any) -> Optional[float]:
    value = clean_text(value)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def parse_optional_int(value: Any) -> Optional[int]:
    value = clean_text(value)
    if value is None:
        return None
    try:
        return int(value)
    except ValueError:
        return None


def parse_optional_date(value: Any) -> Optional[date]:
    value = clean_text(value)
    if value is None:
        return None
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError:
        return None


def parse_int_param(value: Optional[str], default: int) -> int:
    """
    Query parameter as int; missing or unparsable values give `default`.
    """
    parsed = parse_optional_int(value)
    return default if parsed is None else parsed


def parse_checkbox(value: Any) -> bool:
    return str(value or "").strip().lower() in ("1", "true", "on", "yes")


# ---- Form -> ORM ----

def apply_card_form(card: StudyCard, form: Mapping[str, Any]) -> StudyCard:
    """
    Copy submitted form fields onto `card` (new or existing).

    Raises CardFormError for a missing title, negative cost or a rating
    outside 0..5. Empty fields are stored as NULL.
    """
    title = clean_text(form.get("title"))
    if not title:
        raise CardFormError("Title is required")

    cost = parse_optional_float(form.get("estimated_cost"))
    if cost is not None and cost < 0:
        raise CardFormError("Estimated cost must be zero or more")

    rating = parse_optional_int(form.get("rating"))
    if rating is not None and not 0 <= rating <= 5:
        raise CardFormError("Rating must be between 0 and 5")

    difficulty = clean_text(form.get("difficulty"))
    if difficulty is not None and difficulty not in DIFFICULTIES:
        difficulty = None

    card.title = title
    card.description = form.get("description") or ""
    card.category = clean_text(form.get("category"))
    card.difficulty = difficulty
    card.tags = clean_text(form.get("tags"))
    card.notes = clean_text(form.get("notes"))
    card.youtube_url = clean_text(form.get("youtube_url"))
    card.reference_url = clean_text(form.get("reference_url"))
    card.estimated_cost = cost
    card.invest_date = parse_optional_date(form.get("invest_date"))
    card.rating = rating
    card.is_completed = parse_checkbox(form.get("is_completed"))
    return card


def build_card_from_form(form: Mapping[str, Any]) -> StudyCard:
    return apply_card_form(StudyCard(), form)


# ---- ORM -> JSON ----

def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def serialize_card(card: StudyCard) -> Dict[str, Any]:
    # Attachments are passed through as stored (JSON text)
    return {
        "id": card.id,
        "title": card.title,
        "description": card.description,
        "category": card.category,
        "difficulty": card.difficulty,
        "tags": card.tags,
        "notes": card.notes,
        "youtubeUrl": card.youtube_url,
        "referenceUrl": card.reference_url,
        "imageUrl": card.image_url,
        "imageS3Key": card.image_s3_key,
        "estimatedCost": card.estimated_cost,
        "investDate": _iso(card.invest_date),
        "rating": card.rating,
        "isCompleted": bool(card.is_completed),
        "attachments": card.attachments,
        "createdAt": _iso(card.created_at),
        "updatedAt": _iso(card.updated_at),
    }
