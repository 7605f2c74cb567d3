"""
File Storage

Uploads submission files to an S3-compatible bucket (Supabase Storage,
MinIO or AWS S3) and returns their public URL.
"""

import asyncio
import logging
import mimetypes
import secrets

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from sat_portal.core.config import settings
from sat_portal.core.exceptions import UploadFailure

logger = logging.getLogger(__name__)


def object_key(folder: str, filename: str) -> str:
    """Build a collision-resistant object key ``<folder>/<random>.<ext>``."""
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
    return f"{folder}/{secrets.token_hex(8)}.{ext}"


class FileStorage:
    """Thin wrapper around a boto3 S3 client with lazy initialization."""

    def __init__(self, bucket: str | None = None, client=None):
        self._bucket = bucket or settings.storage_bucket
        self._client = client

    def _get_client(self):
        if self._client is None:
            self._client = boto3.client(
                "s3",
                endpoint_url=settings.storage_endpoint_url,
                aws_access_key_id=settings.storage_access_key_id,
                aws_secret_access_key=settings.storage_secret_access_key,
                region_name=settings.storage_region,
                config=Config(signature_version="s3v4", s3={"addressing_style": "path"}),
            )
        return self._client

    def public_url(self, key: str) -> str:
        """Public URL of an object in the bucket."""
        if settings.storage_public_url:
            base = settings.storage_public_url.rstrip("/")
        elif settings.storage_endpoint_url:
            base = settings.storage_endpoint_url.rstrip("/")
        else:
            base = f"https://{self._bucket}.s3.{settings.storage_region}.amazonaws.com"
            return f"{base}/{key}"
        return f"{base}/{self._bucket}/{key}"

    async def put(
        self,
        content: bytes,
        filename: str,
        folder: str,
        content_type: str | None = None,
    ) -> str:
        """
        Upload bytes and return the public URL.

        Raises:
            UploadFailure: If the object could not be written
        """
        key = object_key(folder, filename)
        content_type = (
            content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        )
        try:
            await asyncio.to_thread(
                self._get_client().put_object,
                Bucket=self._bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (BotoCoreError, ClientError) as e:
            raise UploadFailure(f"Upload of {filename} failed: {e}") from e
        return self.public_url(key)

    async def upload(
        self,
        content: bytes,
        filename: str,
        folder: str,
        content_type: str | None = None,
    ) -> str | None:
        """
        Upload bytes, returning the public URL or None when the upload failed.

        Failures are logged; callers keep whatever reference they already had.
        """
        try:
            url = await self.put(content, filename, folder, content_type)
        except UploadFailure as e:
            logger.error(f"[Storage] {e.message}")
            return None
        logger.info(f"[Storage] Uploaded {filename} to {url}")
        return url


_storage: FileStorage | None = None


def get_storage() -> FileStorage:
    """FastAPI dependency returning the shared FileStorage."""
    global _storage
    if _storage is None:
        _storage = FileStorage()
    return _storage
