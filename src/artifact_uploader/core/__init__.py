"""
Core of the artifact uploader: contracts, key naming, retention and
no-files policies, configuration, and the upload orchestrator.
"""

from .config import ConfigService, ConfigSnapshot, UploadInputs
from .contracts import (
    ArtifactIdentity,
    DiscoveredFileSet,
    ObjectMetadata,
    PipelineResult,
    RetentionConfig,
    UploadOutcome,
)
from .errors import (
    ArtifactUploadError,
    ConfigurationError,
    DiscoveryError,
    PathMismatchError,
    TransportError,
)
from .no_files import NoFileOptions
from .orchestrator import UploadOrchestrator

__all__ = [
    "ArtifactIdentity",
    "ArtifactUploadError",
    "ConfigService",
    "ConfigSnapshot",
    "ConfigurationError",
    "DiscoveredFileSet",
    "DiscoveryError",
    "NoFileOptions",
    "ObjectMetadata",
    "PathMismatchError",
    "PipelineResult",
    "RetentionConfig",
    "TransportError",
    "UploadInputs",
    "UploadOrchestrator",
    "UploadOutcome",
]
