from __future__ import annotations

import io
import logging
import os

import boto3
from botocore.client import Config
from botocore.exceptions import BotoCoreError, ClientError

from ..core.config import settings
from ..models.exceptions import ServiceNotConfiguredException, StorageException

logger = logging.getLogger(__name__)


def _s3_client():
    # Allow local S3-compatible endpoint (e.g., MinIO) via S3_ENDPOINT_URL
    endpoint_url = (
        os.getenv("S3_ENDPOINT_URL")
        or (f"https://{settings.r2_account_id}.r2.cloudflarestorage.com" if settings.r2_account_id else None)
    )
    if not (settings.r2_access_key_id and settings.r2_secret_access_key and endpoint_url):
        raise ServiceNotConfiguredException("Object storage", "R2_ACCESS_KEY_ID")
    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=settings.r2_access_key_id,
        aws_secret_access_key=settings.r2_secret_access_key,
        config=Config(signature_version="s3v4"),
        region_name="auto",
    )


def put_object(key: str, data: bytes, content_type: str = "image/png") -> None:
    s3 = _s3_client()
    try:
        s3.put_object(Bucket=settings.r2_bucket, Key=key, Body=io.BytesIO(data), ContentType=content_type)
    except (BotoCoreError, ClientError) as e:
        raise StorageException("put", key=key, storage_backend="r2", details={"reason": str(e)}) from e


def public_url(key: str, expires_seconds: int = 7 * 24 * 3600) -> str:
    """Public bucket URL when one is configured, otherwise a presigned GET."""
    if settings.r2_public_base_url:
        return f"{settings.r2_public_base_url.rstrip('/')}/{key}"
    s3 = _s3_client()
    return s3.generate_presigned_url(
        ClientMethod="get_object",
        Params={"Bucket": settings.r2_bucket, "Key": key},
        ExpiresIn=expires_seconds,
    )


def delete_object(key: str) -> bool:
    """
    Delete an object from R2/S3 storage.

    Returns:
        True if deleted, False otherwise
    """
    s3 = _s3_client()
    try:
        s3.delete_object(Bucket=settings.r2_bucket, Key=key)
        return True
    except (BotoCoreError, ClientError) as e:
        logger.warning(f"Failed to delete {key} from R2: {e}")
        return False
