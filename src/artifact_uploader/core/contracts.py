"""
Contracts and payload schemas for the artifact upload pipeline.

Value objects are frozen pydantic models passed between the finder, the
orchestrator, and reporters. The collaborator protocols describe the
capabilities the orchestrator consumes; concrete implementations live under
`artifact_uploader.modules`.
"""

from __future__ import annotations

import datetime as dt
import enum
from collections.abc import Sequence
from pathlib import Path
from typing import IO, Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field, field_validator


class BasePayload(BaseModel):
    """Base class for all pipeline value objects."""

    model_config = ConfigDict(frozen=True)


class DiscoveredFileSet(BasePayload):
    """Files matched by the finder together with the directory they are relative to."""

    root_directory: str = Field(description="Directory every discovered file descends from.")
    files: tuple[str, ...] = Field(
        default=(), description="Absolute file paths in discovery order."
    )

    @field_validator("root_directory", mode="before")
    @classmethod
    def _coerce_root(cls, value: Any) -> str:
        return str(value)

    @field_validator("files", mode="before")
    @classmethod
    def _coerce_files(cls, value: Any) -> tuple[str, ...]:
        if isinstance(value, str | Path):
            return (str(value),)
        return tuple(str(item) for item in value)

    @property
    def count(self) -> int:
        return len(self.files)

    @property
    def is_empty(self) -> bool:
        return not self.files


class ArtifactIdentity(BasePayload):
    """Repository/run identity used to namespace object keys."""

    owner: str
    repo: str
    run_id: str
    artifact_name: str

    @field_validator("run_id", mode="before")
    @classmethod
    def _coerce_run_id(cls, value: Any) -> str:
        return str(value)


class RetentionConfig(BasePayload):
    """Retention window in days; `None` or non-positive values fall back to the default."""

    days: int | None = Field(default=None)


class ObjectMetadata(BasePayload):
    """Metadata attached to every object written for an artifact."""

    acl: str = Field(default="public-read")
    expires: dt.datetime


class UploadStatus(enum.StrEnum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class UploadOutcome(BasePayload):
    """Result of a single object write."""

    source_path: str
    relative_path: str | None = Field(default=None)
    object_key: str | None = Field(default=None)
    status: UploadStatus
    reason: str | None = Field(default=None)

    @classmethod
    def succeeded(cls, source_path: str, relative_path: str, object_key: str) -> UploadOutcome:
        return cls(
            source_path=source_path,
            relative_path=relative_path,
            object_key=object_key,
            status=UploadStatus.SUCCEEDED,
        )

    @classmethod
    def failed(
        cls,
        source_path: str,
        reason: str,
        *,
        relative_path: str | None = None,
        object_key: str | None = None,
    ) -> UploadOutcome:
        return cls(
            source_path=source_path,
            relative_path=relative_path,
            object_key=object_key,
            status=UploadStatus.FAILED,
            reason=reason,
        )

    @property
    def ok(self) -> bool:
        return self.status is UploadStatus.SUCCEEDED


class PipelineResult(BasePayload):
    """Aggregate outcome of one upload run."""

    outcomes: tuple[UploadOutcome, ...] = Field(default=())
    first_failure: str | None = Field(
        default=None,
        description="Reason of the first failure, or the NoFiles error message.",
    )

    @classmethod
    def from_outcomes(cls, outcomes: Sequence[UploadOutcome]) -> PipelineResult:
        first = next((outcome for outcome in outcomes if not outcome.ok), None)
        return cls(outcomes=tuple(outcomes), first_failure=first.reason if first else None)

    @property
    def any_failed(self) -> bool:
        return self.first_failure is not None

    @property
    def count(self) -> int:
        """Number of write attempts made during the run."""
        return len(self.outcomes)

    @property
    def uploaded(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)


@runtime_checkable
class StorageClient(Protocol):
    """Object store capability used by the orchestrator."""

    def put(self, object_key: str, source: IO[bytes], metadata: ObjectMetadata) -> None: ...


@runtime_checkable
class FileFinder(Protocol):
    """Resolves a search path expression into a discovered file set."""

    def find(self, search_path: str) -> DiscoveredFileSet: ...


@runtime_checkable
class Reporter(Protocol):
    """Status surface of the enclosing automation system."""

    def info(self, message: str) -> None: ...

    def warning(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...

    def debug(self, message: str) -> None: ...

    def set_failed(self, message: str) -> None: ...


__all__ = [
    "ArtifactIdentity",
    "BasePayload",
    "DiscoveredFileSet",
    "FileFinder",
    "ObjectMetadata",
    "PipelineResult",
    "Reporter",
    "RetentionConfig",
    "StorageClient",
    "UploadOutcome",
    "UploadStatus",
]
