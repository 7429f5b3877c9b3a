"""
Artifact Uploader - publish workflow artifacts to S3

Uploads the files matched by a search path as one artifact, keyed by
repository, run, and artifact name, with a retention-based expiry.
"""

__version__ = "0.1.0"

from artifact_uploader.core import (
    ArtifactIdentity,
    ConfigService,
    DiscoveredFileSet,
    PipelineResult,
    RetentionConfig,
    UploadOrchestrator,
)

__all__ = [
    "ArtifactIdentity",
    "ConfigService",
    "DiscoveredFileSet",
    "PipelineResult",
    "RetentionConfig",
    "UploadOrchestrator",
]
