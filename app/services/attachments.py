# app/services/attachments.py
#
# Attachment Helpers
# Cards keep their uploaded files as a JSON list in StudyCard.attachments.
# Only the pages (and the diagnostics script) interpret that list;
# the finance aggregation never looks at it.

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from models import StudyCard

logger = logging.getLogger(__name__)

CARD_IMAGE = "card-image"
ATTACHMENT = "attachment"

IMAGE_SUBFOLDER = "study-cards/images"
FILE_SUBFOLDER = "study-cards/attachments"


# ---- (De)serialization ----

def parse_attachments(raw: Optional[str]) -> List[Dict[str, Any]]:
    """
    Decode the stored JSON list. Broken JSON or non-dict items are dropped.
    """
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Ignoring malformed attachments JSON: %.80r", raw)
        return []
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]


def dump_attachments(items: List[Dict[str, Any]]) -> Optional[str]:
    return json.dumps(items) if items else None


def make_attachment(
    s3_key: str,
    url: str,
    original_name: str,
    mime_type: str,
    file_size: int,
    kind: str = ATTACHMENT,
) -> Dict[str, Any]:
    return {
        "kind": kind,
        "s3Key": s3_key,
        "url": url,
        "originalName": original_name,
        "mimeType": mime_type,
        "fileSize": file_size,
        "subfolder": IMAGE_SUBFOLDER if kind == CARD_IMAGE else FILE_SUBFOLDER,
    }


def attachment_kind(item: Dict[str, Any]) -> str:
    return item.get("kind") or ATTACHMENT


# ---- Page view ----

def split_card_attachments(card: StudyCard) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
    """
    Return (gallery_images, file_attachments) for the detail page.

    Each item gets an "index" (position in the stored list) so the download
    route can find it again. The legacy image_url is shown first in the
    gallery unless it is already one of the stored images.
    """
    items = parse_attachments(card.attachments)

    gallery: List[Dict[str, Any]] = []
    files: List[Dict[str, Any]] = []
    for index, item in enumerate(items):
        entry = dict(item, index=index)
        if attachment_kind(item) == CARD_IMAGE:
            gallery.append(entry)
        else:
            files.append(entry)

    if card.image_url and not any(
        img.get("s3Key") == card.image_s3_key or img.get("url") == card.image_url
        for img in gallery
    ):
        gallery.insert(0, {
            "kind": CARD_IMAGE,
            "s3Key": card.image_s3_key or card.image_url,
            "url": card.image_url,
            "originalName": "Card image",
            "mimeType": "image/jpeg",
            "fileSize": 0,
            "subfolder": IMAGE_SUBFOLDER,
            "index": None,
        })

    return gallery, files


def stored_keys(card: StudyCard) -> List[str]:
    """
    All object keys a card owns (used when the card is deleted).
    """
    keys = [item["s3Key"] for item in parse_attachments(card.attachments) if item.get("s3Key")]
    if card.image_s3_key and card.image_s3_key not in keys:
        keys.append(card.image_s3_key)
    return keys
