"""
S3 storage client used by the upload orchestrator.

Each `put` streams one open file object to the configured bucket through
boto3's managed transfer (`upload_fileobj`), which switches to multipart
uploads above the part size and may transfer parts of a single file in
parallel. Retries are delegated to botocore's retry handler; any failure that
escapes it is raised as `TransportError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import IO, Any

from boto3.exceptions import Boto3Error
from boto3.s3.transfer import TransferConfig
from boto3.session import Session
from botocore.config import Config as BotoConfig
from botocore.exceptions import BotoCoreError, ClientError

from ...core.config import TransferSettings
from ...core.contracts import ObjectMetadata
from ...core.errors import ConfigurationError, TransportError

logger = logging.getLogger(__name__)


class S3StorageClient:
    """Write artifact objects into a single S3 bucket."""

    def __init__(
        self,
        *,
        bucket: str,
        region: str,
        settings: TransferSettings | None = None,
        client_factory: Callable[[], Any] | None = None,
    ) -> None:
        if not bucket:
            raise ConfigurationError("S3StorageClient requires a bucket name.")
        if not region:
            raise ConfigurationError("S3StorageClient requires a region.")
        self._bucket = bucket
        self._region = region
        self._settings = settings or TransferSettings()
        self._client_factory = client_factory or self._default_client_factory
        self._client: Any | None = None
        self._transfer_config = TransferConfig(
            multipart_threshold=self._settings.part_size_bytes,
            multipart_chunksize=self._settings.part_size_bytes,
            max_concurrency=self._settings.queue_size,
        )

    @property
    def client(self) -> Any:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def put(self, object_key: str, source: IO[bytes], metadata: ObjectMetadata) -> None:
        extra_args = {"ACL": metadata.acl, "Expires": metadata.expires}
        logger.debug(
            "s3 upload bucket=%s key=%s extra_args=%s", self._bucket, object_key, extra_args
        )
        try:
            self.client.upload_fileobj(
                source,
                self._bucket,
                object_key,
                ExtraArgs=extra_args,
                Config=self._transfer_config,
            )
        except (Boto3Error, BotoCoreError, ClientError) as exc:
            raise TransportError(
                f"Failed to upload s3://{self._bucket}/{object_key}: {exc}"
            ) from exc

    def _default_client_factory(self) -> Any:
        session = Session(
            aws_access_key_id=self._settings.aws_access_key_id,
            aws_secret_access_key=self._settings.aws_secret_access_key,
            aws_session_token=self._settings.aws_session_token,
            region_name=self._region,
        )
        return session.client(
            "s3",
            endpoint_url=self._settings.endpoint_url,
            region_name=self._region,
            config=BotoConfig(
                retries={"max_attempts": self._settings.max_retries, "mode": "standard"}
            ),
        )


__all__ = ["S3StorageClient"]
