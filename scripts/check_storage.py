"""
Object storage smoke test.

Checks that the configured bucket is reachable and writable:
1. list objects under the root folder
2. upload a small text file
3. generate a signed download URL (valid 1 hour)
4. download the file again and compare

Usage:
    python -m scripts.check_storage

Exit code 1 on any failure.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime

from config import load_settings
from app.services.storage import DEFAULT_URL_EXPIRY, ObjectStorage

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)

TROUBLESHOOTING = [
    "Verify AWS_ACCESS_KEY_ID / AWS_SECRET_ACCESS_KEY",
    "Check AWS_S3_BUCKET and AWS_REGION",
    "Make sure the bucket policy allows read and write",
    "Verify AWS_ENDPOINT (e.g. https://sgp1.digitaloceanspaces.com for Spaces)",
]


def check_storage(storage: ObjectStorage) -> None:
    logger.info("Step 1: listing objects under %r", storage.root_folder)
    objects = storage.list(max_keys=10)
    logger.info("Found %d objects", len(objects))
    for obj in objects[:5]:
        logger.info("  - %s (%s bytes)", obj["key"], obj["size"])

    logger.info("Step 2: uploading test file")
    content = f"Test file created at {datetime.now().isoformat()}"
    key = storage.put(f"test-{int(datetime.now().timestamp() * 1000)}.txt", content.encode("utf-8"), "text/plain")
    logger.info("Uploaded to %s", key)

    logger.info("Step 3: generating signed URL")
    url = storage.presign(key, expires_in=DEFAULT_URL_EXPIRY)
    logger.info("Signed URL (expires in 1 hour): %s", url)

    logger.info("Step 4: downloading test file")
    downloaded = storage.get(key).decode("utf-8")
    if downloaded != content:
        raise RuntimeError(f"Downloaded content does not match: {downloaded!r}")
    logger.info("Downloaded content matches")


def main() -> int:
    settings = load_settings()
    if not settings.storage_configured:
        logger.error("AWS_S3_BUCKET is not set")
        return 1

    logger.info(
        "Bucket=%s region=%s endpoint=%s root=%r",
        settings.s3_bucket, settings.s3_region, settings.s3_endpoint, settings.s3_root_folder,
    )

    try:
        check_storage(ObjectStorage(settings))
    except Exception as e:
        logger.error("Storage check failed: %r", e)
        for i, tip in enumerate(TROUBLESHOOTING, start=1):
            logger.error("  %d. %s", i, tip)
        return 1

    logger.info("All storage checks passed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
