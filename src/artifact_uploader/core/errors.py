"""Error taxonomy shared by the upload pipeline."""

from __future__ import annotations


class ArtifactUploadError(RuntimeError):
    """Base class for every fatal error raised by the uploader."""


class DiscoveryError(ArtifactUploadError):
    """Raised when a search path expression cannot be resolved into files."""


class PathMismatchError(ArtifactUploadError):
    """Raised when a discovered file does not live under the artifact root directory."""

    def __init__(self, root_directory: str, file_path: str) -> None:
        super().__init__(f"File {file_path} is not located under root directory {root_directory}")
        self.root_directory = root_directory
        self.file_path = file_path


class TransportError(ArtifactUploadError):
    """Raised by storage clients when an object write fails (I/O, auth, quota)."""


class ConfigurationError(ArtifactUploadError):
    """Raised when inputs or configuration files are missing or invalid."""


__all__ = [
    "ArtifactUploadError",
    "ConfigurationError",
    "DiscoveryError",
    "PathMismatchError",
    "TransportError",
]
