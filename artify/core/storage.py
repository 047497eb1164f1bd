# artify/core/storage.py
"""S3 object storage collaborator.

Uploads never pass through the application: the client asks for a
presigned PUT url, sends the bytes straight to S3, then reports the key so
the document metadata can be recorded (see `artify.services.documents`).
"""
from __future__ import annotations

import logging
import os
import re
import secrets
import time
from typing import Optional, Tuple
from urllib.parse import urlsplit

import boto3
from botocore.exceptions import ClientError

from artify.core.config import settings
from artify.core.logger import kv

logger = logging.getLogger(__name__)

_unsafe_re = re.compile(r"[^A-Za-z0-9]")
_host_re = re.compile(r"^(?P<bucket>[a-z0-9.\-]+)\.s3\.(?P<region>[a-z0-9\-]+)\.amazonaws\.com$")


def unique_key(filename: str, extension: Optional[str] = None) -> str:
    """
    {basename}-{timestamp}-{random}.{extension}

    `extension` overrides the one taken from `filename` and may be given with
    or without the leading dot.
    """
    base, ext = os.path.splitext(os.path.basename(filename or ""))
    if extension:
        ext = extension if extension.startswith(".") else f".{extension}"
    safe = _unsafe_re.sub("_", base) or "file"
    return f"{safe}-{int(time.time() * 1000)}-{secrets.token_hex(4)}{ext.lower()}"


def public_url(key: str, bucket: str, region: str) -> str:
    return f"https://{bucket}.s3.{region}.amazonaws.com/{key}"


def parse_public_url(url: str) -> Tuple[str, str, str]:
    """Inverse of `public_url`: returns (key, bucket, region)."""
    parts = urlsplit(url)
    if parts.scheme != "https":
        raise ValueError("invalid s3 url")
    m = _host_re.match(parts.netloc)
    key = parts.path[1:]
    if not m or not key:
        raise ValueError("invalid s3 url")
    return key, m.group("bucket"), m.group("region")


class ObjectStorage:
    def __init__(
        self,
        bucket: str,
        region: str,
        endpoint_url: Optional[str] = None,
        upload_expires: int = 900,
    ) -> None:
        self.bucket = bucket
        self.region = region
        self.endpoint_url = endpoint_url
        self.upload_expires = upload_expires
        self._client = None

    def _get_client(self):
        if self._client is not None:
            return self._client

        kwargs = {"region_name": self.region}
        if self.endpoint_url:
            kwargs["endpoint_url"] = self.endpoint_url

        self._client = boto3.client("s3", **kwargs)
        return self._client

    def issue_upload_url(self, key: str, bucket: Optional[str] = None, expires_in: Optional[int] = None) -> str:
        return self._get_client().generate_presigned_url(
            "put_object",
            Params={"Bucket": bucket or self.bucket, "Key": key},
            ExpiresIn=expires_in or self.upload_expires,
        )

    def object_exists(self, key: str, bucket: Optional[str] = None) -> bool:
        try:
            self._get_client().head_object(Bucket=bucket or self.bucket, Key=key)
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code in ("404", "NoSuchKey", "NotFound"):
                return False
            raise
        return True

    def ensure_bucket(self, bucket: Optional[str] = None, region: Optional[str] = None) -> bool:
        """Create the bucket if it is missing. Returns True when created."""
        bucket = bucket or self.bucket
        region = region or self.region
        client = self._get_client()
        try:
            client.head_bucket(Bucket=bucket)
            return False
        except ClientError as e:
            code = str(e.response.get("Error", {}).get("Code", ""))
            if code not in ("404", "NoSuchBucket", "NotFound"):
                raise

        params = {"Bucket": bucket}
        # us-east-1 rejects an explicit LocationConstraint
        if region != "us-east-1":
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}
        client.create_bucket(**params)
        logger.info(kv("storage.bucket_created", bucket=bucket, region=region))
        return True


_storage: ObjectStorage | None = None


def get_storage() -> ObjectStorage:
    global _storage
    if _storage is None:
        _storage = ObjectStorage(
            bucket=settings.aws_bucket,
            region=settings.aws_region,
            endpoint_url=settings.s3_endpoint_url,
            upload_expires=settings.upload_url_expires,
        )
    return _storage


if __name__ == "__main__":
    from artify.core.logger import configure_logging

    configure_logging(settings.log_level)
    storage = get_storage()
    created = storage.ensure_bucket()
    state = "created" if created else "already exists"
    logger.info(kv("storage.bootstrap", bucket=storage.bucket, state=state))
