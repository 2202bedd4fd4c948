"""
Screenshot storage in S3 with presigned download links.
"""

import mimetypes
import uuid
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from ..core.exceptions import UploadError

# Presigned links stay valid for 7 days, the S3 maximum
PRESIGNED_URL_EXPIRY = 7 * 24 * 60 * 60
KEY_PREFIX = "screenshots"


class S3Uploader:
    """Uploads screenshots and returns time-limited links to them."""

    def __init__(self, bucket: str, region: str, access_key: Optional[str] = None,
                 secret_key: Optional[str] = None, client=None):
        self.bucket = bucket
        self.region = region
        # Without explicit keys boto3 falls back to its default credential chain
        self.client = client or boto3.client(
            's3',
            region_name=region,
            aws_access_key_id=access_key or None,
            aws_secret_access_key=secret_key or None,
        )

    @classmethod
    def from_config(cls, config) -> "S3Uploader":
        return cls(config.s3_bucket, config.s3_region, config.s3_access_key, config.s3_secret_key)

    def upload(self, data: bytes, content_type: str, filename: Optional[str] = None) -> str:
        """
        Store a file and return a presigned GET URL.

        Args:
            data: File contents
            content_type: MIME type
            filename: Original file name, used for the extension

        Returns:
            Presigned URL valid for 7 days

        Raises:
            UploadError: if S3 rejects the upload or the URL cannot be signed
        """
        key = f"{KEY_PREFIX}/{uuid.uuid4().hex}{self._extension(content_type, filename)}"
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, ContentType=content_type)
            return self.client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket, 'Key': key},
                ExpiresIn=PRESIGNED_URL_EXPIRY,
            )
        except (BotoCoreError, ClientError) as e:
            raise UploadError(f"failed to upload {key} to bucket {self.bucket}: {e}") from e

    @staticmethod
    def _extension(content_type: str, filename: Optional[str]) -> str:
        if filename and '.' in filename:
            return '.' + filename.rsplit('.', 1)[1].lower()
        return mimetypes.guess_extension(content_type or "") or ""
