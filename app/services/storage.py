# app/services/storage.py
"""
Object storage for card attachments (S3-compatible, e.g. DigitalOcean Spaces).

All keys live under the configured root folder. Keys returned by ``put`` are
full keys (root folder included); every other method accepts either form.
"""

import logging
import re
import time
import uuid
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urlparse

import boto3
from botocore.config import Config as BotoConfig

from config import Settings

logger = logging.getLogger(__name__)

# Signed download links stay valid for one hour
DEFAULT_URL_EXPIRY = 3600

_UNSAFE_NAME_RE = re.compile(r"[^A-Za-z0-9._-]+")


def safe_filename(filename: str) -> str:
    name = _UNSAFE_NAME_RE.sub("-", filename.strip()).strip("-.")
    return name or "file"


def build_object_key(subfolder: str, filename: str) -> str:
    """
    Unique key for a new upload: <subfolder>/<millis>-<random>-<safe name>.
    """
    stamp = int(time.time() * 1000)
    return f"{subfolder.strip('/')}/{stamp}-{uuid.uuid4().hex[:8]}-{safe_filename(filename)}"


class ObjectStorage:
    def __init__(self, settings: Settings, client: Any = None):
        self.bucket = settings.s3_bucket
        self.region = settings.s3_region
        self.endpoint = settings.s3_endpoint
        self.root_folder = (settings.s3_root_folder or "").strip("/")

        self.client = client or boto3.client(
            "s3",
            region_name=settings.s3_region,
            endpoint_url=settings.s3_endpoint,
            aws_access_key_id=settings.s3_access_key_id,
            aws_secret_access_key=settings.s3_secret_access_key,
            config=BotoConfig(s3={"addressing_style": "virtual"}),
        )

    def full_key(self, key: str) -> str:
        key = key.lstrip("/")
        if not self.root_folder:
            return key
        if key == self.root_folder or key.startswith(self.root_folder + "/"):
            return key
        return f"{self.root_folder}/{key}" if key else self.root_folder

    def list(self, prefix: str = "", max_keys: int = 10) -> List[Dict[str, Any]]:
        response = self.client.list_objects_v2(
            Bucket=self.bucket,
            Prefix=self.full_key(prefix),
            MaxKeys=max_keys,
        )
        return [
            {"key": obj["Key"], "size": obj.get("Size", 0)}
            for obj in response.get("Contents", [])
        ]

    def put(self, key: str, body: bytes, content_type: Optional[str] = None) -> str:
        full_key = self.full_key(key)
        params = {"Bucket": self.bucket, "Key": full_key, "Body": body}
        if content_type:
            params["ContentType"] = content_type
        self.client.put_object(**params)
        logger.info("Uploaded %s (%d bytes)", full_key, len(body))
        return full_key

    def get(self, key: str) -> bytes:
        response = self.client.get_object(Bucket=self.bucket, Key=self.full_key(key))
        return response["Body"].read()

    def delete(self, key: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=self.full_key(key))
        logger.info("Deleted %s", self.full_key(key))

    def presign(self, key: str, expires_in: int = DEFAULT_URL_EXPIRY) -> str:
        return self.client.generate_presigned_url(
            "get_object",
            Params={"Bucket": self.bucket, "Key": self.full_key(key)},
            ExpiresIn=expires_in,
        )

    def public_url(self, key: str) -> str:
        """
        Virtual-host style URL: https://<bucket>.<endpoint host>/<key>
        """
        path = quote(self.full_key(key))
        if self.endpoint:
            parsed = urlparse(self.endpoint)
            scheme = parsed.scheme or "https"
            host = parsed.netloc or parsed.path
            return f"{scheme}://{self.bucket}.{host}/{path}"
        return f"https://{self.bucket}.s3.{self.region or 'us-east-1'}.amazonaws.com/{path}"
