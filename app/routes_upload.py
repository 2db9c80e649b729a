# routes_upload.py
"""
Routes for card attachments: upload to object storage, download through a
short-lived signed URL.
"""

import logging
from typing import Any, Dict, List

from fastapi import (
    APIRouter,
    Depends,
    File,
    Form,
    HTTPException,
    UploadFile,
)
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.orm import Session

from app.deps import get_card_or_404, get_db, get_storage
from app.services.attachments import (
    ATTACHMENT,
    CARD_IMAGE,
    FILE_SUBFOLDER,
    IMAGE_SUBFOLDER,
    dump_attachments,
    make_attachment,
    parse_attachments,
)
from app.services.storage import ObjectStorage, build_object_key

logger = logging.getLogger(__name__)

router = APIRouter()


# -------------------------------------------------------------------
# Upload one or more files to a card
# -------------------------------------------------------------------

@router.post("/cards/{card_id}/attachments")
async def upload_attachments(
    card_id: int,
    files: List[UploadFile] = File(...),
    kind: str = Form(ATTACHMENT),
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    """
    - Store each file under study-cards/images or study-cards/attachments
    - Append one attachment record per file to the card's JSON list
    - Redirect back to the card page
    """
    card = get_card_or_404(db, card_id)

    kind = CARD_IMAGE if kind == CARD_IMAGE else ATTACHMENT
    subfolder = IMAGE_SUBFOLDER if kind == CARD_IMAGE else FILE_SUBFOLDER

    items: List[Dict[str, Any]] = parse_attachments(card.attachments)

    try:
        for upload in files:
            if not upload.filename:
                continue

            data = await upload.read()
            content_type = upload.content_type or "application/octet-stream"
            key = storage.put(build_object_key(subfolder, upload.filename), data, content_type)

            items.append(
                make_attachment(
                    s3_key=key,
                    url=storage.public_url(key),
                    original_name=upload.filename,
                    mime_type=content_type,
                    file_size=len(data),
                    kind=kind,
                )
            )

        card.attachments = dump_attachments(items)
        db.commit()
    except Exception:
        db.rollback()
        logger.exception("Uploading attachments to card #%s failed", card_id)
        return HTMLResponse(
            f"""
            <html>
            <body style="font-family:sans-serif; padding:20px;">
                <h1>Error while uploading files</h1>
                <a href="/cards/{card_id}">Back to card</a>
            </body>
            </html>
            """,
            status_code=500,
        )

    return RedirectResponse(url=f"/cards/{card_id}", status_code=303)


# -------------------------------------------------------------------
# Download: redirect to a signed URL (valid 1 hour)
# -------------------------------------------------------------------

@router.get("/cards/{card_id}/attachments/{index}")
def download_attachment(
    card_id: int,
    index: int,
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_storage),
):
    card = get_card_or_404(db, card_id)
    items = parse_attachments(card.attachments)

    if not 0 <= index < len(items):
        raise HTTPException(status_code=404, detail="Attachment not found")

    item = items[index]
    key = item.get("s3Key")
    url = storage.presign(key) if key else item.get("url")
    if not url:
        raise HTTPException(status_code=404, detail="Attachment has no stored file")

    return RedirectResponse(url=url, status_code=307)
