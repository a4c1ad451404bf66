"""Blob storage for uploaded document bytes (local directory or S3)."""

import logging
from pathlib import Path

import boto3
from botocore.exceptions import ClientError

from studycompanion.config import Settings
from studycompanion.exceptions import StorageError

logger = logging.getLogger(__name__)


class LocalBlobStorage:
    """Stores uploads as files in a directory on this machine."""

    def __init__(self, upload_dir: str | Path):
        self.upload_dir = Path(upload_dir)

    async def save(self, data: bytes, filename: str) -> str:
        """Write ``data`` under ``filename`` and return its location."""
        path = self.upload_dir / filename
        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to save {filename}: {e}") from e
        return str(path)

    async def delete(self, location: str) -> None:
        """Remove a stored file. A file that is already gone is only logged."""
        try:
            Path(location).unlink()
        except FileNotFoundError:
            logger.warning("Could not delete %s: file does not exist", location)
        except OSError as e:
            raise StorageError(f"Failed to delete {location}: {e}") from e


class S3BlobStorage:
    """Stores uploads as objects in an S3 bucket."""

    def __init__(self, settings: Settings, prefix: str = "documents"):
        """Initialize S3 client with credentials from settings."""
        client_kwargs = {
            "aws_access_key_id": settings.aws_access_key_id,
            "aws_secret_access_key": settings.aws_secret_access_key,
            "region_name": settings.aws_s3_region,
        }
        # Support MinIO / LocalStack by pointing to a custom endpoint
        if settings.aws_s3_endpoint_url:
            client_kwargs["endpoint_url"] = settings.aws_s3_endpoint_url

        self.s3_client = boto3.client("s3", **client_kwargs)
        self.bucket = settings.aws_s3_bucket
        self.prefix = prefix

    async def save(self, data: bytes, filename: str) -> str:
        """
        Upload document bytes.

        Returns:
            The S3 object key, used as the document's storage location.

        Raises:
            StorageError: If the S3 operation fails
        """
        file_key = f"{self.prefix}/{filename}"
        try:
            self.s3_client.put_object(Bucket=self.bucket, Key=file_key, Body=data)
        except ClientError as e:
            raise StorageError(f"Failed to upload document to S3: {str(e)}") from e
        return file_key

    async def delete(self, location: str) -> None:
        """Delete an object by key."""
        try:
            self.s3_client.delete_object(Bucket=self.bucket, Key=location)
        except ClientError as e:
            raise StorageError(f"Failed to delete document from S3: {str(e)}") from e


BlobStorage = LocalBlobStorage | S3BlobStorage


def build_blob_storage(settings: Settings) -> BlobStorage:
    """Create the blob storage selected by ``settings.blob_storage``."""
    if settings.blob_storage == "s3":
        if not settings.aws_s3_bucket:
            raise ValueError("AWS_S3_BUCKET must be set when BLOB_STORAGE=s3")
        return S3BlobStorage(settings)
    return LocalBlobStorage(settings.upload_dir)
