"""
Sequential upload driver for a single artifact.

The orchestrator turns a discovered file set into object-store writes. Files
are uploaded one at a time in discovery order and the first failed write
aborts the run, so the artifact is either complete or reported as failed.
"""

from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass

from .contracts import (
    ArtifactIdentity,
    DiscoveredFileSet,
    ObjectMetadata,
    PipelineResult,
    Reporter,
    RetentionConfig,
    StorageClient,
    UploadOutcome,
)
from .errors import PathMismatchError, TransportError
from .naming import artifact_prefix, object_key, relative_path
from .no_files import NoFileOptions, apply_no_files_decision, resolve_no_files
from .retention import RetentionPolicy

logger = logging.getLogger(__name__)

LARGE_BATCH_THRESHOLD = 10_000


@dataclass(frozen=True, slots=True)
class UploadTarget:
    source_path: str
    relative_path: str
    object_key: str
    expires_at: dt.datetime


class UploadOrchestrator:
    """Drive the per-file upload sequence and aggregate one pipeline result."""

    def __init__(
        self,
        storage: StorageClient,
        reporter: Reporter,
        *,
        retention_policy: RetentionPolicy | None = None,
        large_batch_threshold: int = LARGE_BATCH_THRESHOLD,
    ) -> None:
        self._storage = storage
        self._reporter = reporter
        self._retention = retention_policy or RetentionPolicy()
        self._large_batch_threshold = large_batch_threshold

    def run(
        self,
        file_set: DiscoveredFileSet,
        identity: ArtifactIdentity,
        retention: RetentionConfig | None = None,
        *,
        if_no_files_found: NoFileOptions | str = NoFileOptions.WARN,
        search_path: str = "",
    ) -> PipelineResult:
        if file_set.is_empty:
            decision = resolve_no_files(if_no_files_found, search_path)
            apply_no_files_decision(decision, self._reporter)
            if decision.failed:
                return PipelineResult(first_failure=decision.message)
            return PipelineResult()

        total = file_set.count
        plural = "" if total == 1 else "s"
        self._reporter.info(f"With the provided path, there will be {total} file{plural} uploaded")
        self._reporter.debug(f"Root artifact directory is {file_set.root_directory}")
        if total > self._large_batch_threshold:
            self._reporter.warning(
                f"There are over {self._large_batch_threshold:,} files in this artifact, "
                "consider creating an archive before upload to improve the upload performance."
            )

        prefix = artifact_prefix(identity)
        expires_at = self._retention.expiration_for(retention or RetentionConfig())
        logger.debug("Uploading %d files under %s (expires %s)", total, prefix, expires_at)

        outcomes: list[UploadOutcome] = []
        for file_path in file_set.files:
            outcome = self._upload_one(file_set.root_directory, file_path, prefix, expires_at)
            outcomes.append(outcome)
            if not outcome.ok:
                skipped = total - len(outcomes)
                if skipped:
                    logger.info("Aborting upload; %d remaining files were not attempted", skipped)
                break
        return PipelineResult.from_outcomes(outcomes)

    def _upload_one(
        self,
        root_directory: str,
        file_path: str,
        prefix: str,
        expires_at: dt.datetime,
    ) -> UploadOutcome:
        try:
            target = self._build_target(root_directory, file_path, prefix, expires_at)
        except PathMismatchError as exc:
            self._reporter.error(f"Error uploading {file_path}: {exc}")
            return UploadOutcome.failed(file_path, str(exc))

        self._reporter.debug(
            f"Uploading {target.source_path} to {target.object_key} "
            f"(expires {target.expires_at.isoformat()})"
        )
        self._reporter.info(f"Starting upload of {target.relative_path}")
        metadata = ObjectMetadata(expires=target.expires_at)
        try:
            with open(target.source_path, "rb") as source:
                self._storage.put(target.object_key, source, metadata)
        except (TransportError, OSError) as exc:
            logger.debug("Upload of %s failed", target.source_path, exc_info=True)
            self._reporter.error(f"Error uploading {target.relative_path}")
            return UploadOutcome.failed(
                target.source_path,
                str(exc) or exc.__class__.__name__,
                relative_path=target.relative_path,
                object_key=target.object_key,
            )
        self._reporter.info(f"Finished upload of {target.relative_path}")
        return UploadOutcome.succeeded(target.source_path, target.relative_path, target.object_key)

    @staticmethod
    def _build_target(
        root_directory: str,
        file_path: str,
        prefix: str,
        expires_at: dt.datetime,
    ) -> UploadTarget:
        relative = relative_path(root_directory, file_path)
        return UploadTarget(
            source_path=file_path,
            relative_path=relative,
            object_key=object_key(prefix, root_directory, file_path),
            expires_at=expires_at,
        )


__all__ = ["LARGE_BATCH_THRESHOLD", "UploadOrchestrator", "UploadTarget"]
