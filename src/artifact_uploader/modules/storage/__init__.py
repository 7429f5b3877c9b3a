"""Object storage backends."""

from .s3_client import S3StorageClient

__all__ = ["S3StorageClient"]
