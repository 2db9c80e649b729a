"""
Print the attachments JSON of the newest cards, to debug upload issues.

For each of the 20 newest cards: id, title, number of file attachments
(card images excluded), total items in the JSON, and per-item details.

Usage:
    python -m scripts.debug_attachments [--limit 20]
"""

from __future__ import annotations

import argparse
from pprint import pprint

from config import load_settings
from db import make_engine, make_session_factory
from models import StudyCard
from app.services.attachments import CARD_IMAGE, attachment_kind, parse_attachments


def describe_card(card: StudyCard) -> dict:
    items = parse_attachments(card.attachments)
    return {
        "id": card.id,
        "title": card.title,
        "attachmentCount": sum(1 for item in items if attachment_kind(item) != CARD_IMAGE),
        "totalItemsInJson": len(items),
        "details": [
            {
                "originalName": item.get("originalName"),
                "mimeType": item.get("mimeType"),
                "kind": attachment_kind(item),
                "s3Key": item.get("s3Key"),
            }
            for item in items
        ],
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Dump card attachments JSON")
    parser.add_argument("--limit", type=int, default=20, help="Number of newest cards (default: 20)")
    args = parser.parse_args()

    engine = make_engine(load_settings().database_url)
    db = make_session_factory(engine)()
    try:
        cards = db.query(StudyCard).order_by(StudyCard.id.desc()).limit(args.limit).all()
        for card in cards:
            pprint(describe_card(card), sort_dicts=False)
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    main()
