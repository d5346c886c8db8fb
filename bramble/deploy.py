"""Publishing a generated site to S3.

``S3Uploader`` writes one object per call through a boto3 S3 client. The
site builder walks the destination tree and hands each file to an uploader;
see ``Site.deploy``.
"""

from __future__ import annotations

import mimetypes
from pathlib import PurePath
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from .errors import UploadError

DEFAULT_REGION = "us-east-1"
DEFAULT_CONTENT_TYPE = "application/octet-stream"
PUBLIC_READ = "public-read"


def guess_content_type(key: str) -> str:
    """Infer a content type from the file extension.

    Examples:
        >>> guess_content_type("css/site.css")
        'text/css'

        >>> guess_content_type("LICENSE")
        'application/octet-stream'
    """
    content_type, _ = mimetypes.guess_type(PurePath(key).name)
    return content_type or DEFAULT_CONTENT_TYPE


class S3Uploader:
    """Uploads objects to a single S3 bucket with public-read visibility.

    Attributes:
        bucket: Bucket name.
        client: boto3 S3 client.
    """

    def __init__(
        self,
        access_key: str,
        secret_key: str,
        bucket: str,
        region: str = DEFAULT_REGION,
        client: Any = None,
    ):
        """Initialize the uploader.

        Args:
            access_key: AWS access key id.
            secret_key: AWS secret access key.
            bucket: Target bucket name.
            region: Bucket region.
            client: Optional pre-built S3 client.
        """
        self.bucket = bucket
        self.client = client or boto3.client(
            "s3",
            aws_access_key_id=access_key,
            aws_secret_access_key=secret_key,
            region_name=region,
        )

    def put(self, key: str, body: bytes, content_type: str) -> None:
        """Write one object.

        Raises:
            UploadError: If S3 rejects the write or the request fails.
        """
        try:
            self.client.put_object(
                Bucket=self.bucket,
                Key=key,
                Body=body,
                ContentType=content_type,
                ACL=PUBLIC_READ,
            )
        except (BotoCoreError, ClientError) as exc:
            raise UploadError(key, f"upload to bucket {self.bucket} failed: {exc}", exc) from exc
