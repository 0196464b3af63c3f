"""
S3 file storage

The application never streams file bytes. Clients upload and download
directly against pre-signed URLs; rows only keep the object key.
"""
import uuid
from functools import lru_cache
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from legal_vault.core.config import settings
from legal_vault.core.logger import logger
from legal_vault.utils.exceptions import InternalError


class StorageService:
    """
    Service layer for AWS S3 operations.
    """

    def __init__(self, client=None, bucket: Optional[str] = None):
        self.s3_client = client or boto3.client(
            's3',
            region_name=settings.AWS_REGION,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
        )
        self.bucket = bucket or settings.S3_BUCKET_NAME

    @staticmethod
    def build_key(folder: str, filename: str) -> str:
        safe_name = filename.replace("/", "_").replace("\\", "_").strip() or "file"
        return f"{folder}/{uuid.uuid4().hex}_{safe_name}"

    def generate_upload_url(
        self,
        key: str,
        content_type: str = "application/pdf",
        expires_in: int = 900,
    ) -> str:
        """
        Generate pre-signed URL for PUT operation (upload).
        """
        try:
            url = self.s3_client.generate_presigned_url(
                'put_object',
                Params={
                    'Bucket': self.bucket,
                    'Key': key,
                    'ContentType': content_type,
                },
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to generate upload URL for %s: %s", key, str(e))
            raise InternalError("Could not prepare the upload") from e

        logger.info("Generated upload URL for: %s", key)
        return url

    def generate_download_url(self, key: str, expires_in: int = 3600) -> str:
        """
        Generate pre-signed URL for GET operation (download).
        """
        try:
            url = self.s3_client.generate_presigned_url(
                'get_object',
                Params={'Bucket': self.bucket, 'Key': key},
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Failed to generate download URL for %s: %s", key, str(e))
            raise InternalError("Could not prepare the download") from e

        logger.info("Generated download URL for: %s", key)
        return url


@lru_cache()
def get_storage_service() -> StorageService:
    return StorageService()
