"""
Object key derivation for uploaded artifacts.

Keys follow `{owner}/{repo}/{run_id}/{artifact_name}/{relative_path}` and are
independent of the storage backend. Every helper here is a pure function.
"""

from __future__ import annotations

from os import PathLike

from .contracts import ArtifactIdentity
from .errors import PathMismatchError

KEY_SEPARATOR = "/"


def _as_posix(value: str | PathLike[str]) -> str:
    return str(value).replace("\\", KEY_SEPARATOR)


def artifact_prefix(identity: ArtifactIdentity) -> str:
    """Return the key prefix shared by every object of an artifact."""
    return KEY_SEPARATOR.join(
        (identity.owner, identity.repo, identity.run_id, identity.artifact_name)
    )


def relative_path(root_directory: str | PathLike[str], file_path: str | PathLike[str]) -> str:
    """
    Strip `root_directory` plus its separator from the start of `file_path`.

    Raises `PathMismatchError` when the file is not strictly below the root.
    The result never begins with a separator.
    """

    root = _as_posix(root_directory).rstrip(KEY_SEPARATOR) + KEY_SEPARATOR
    path = _as_posix(file_path)
    if not path.startswith(root):
        raise PathMismatchError(str(root_directory), str(file_path))
    relative = path[len(root) :].lstrip(KEY_SEPARATOR)
    if not relative:
        raise PathMismatchError(str(root_directory), str(file_path))
    return relative


def object_key(
    prefix: str,
    root_directory: str | PathLike[str],
    file_path: str | PathLike[str],
) -> str:
    """Build the full object key for `file_path` under `prefix`."""
    return f"{prefix}{KEY_SEPARATOR}{relative_path(root_directory, file_path)}"


__all__ = ["KEY_SEPARATOR", "artifact_prefix", "object_key", "relative_path"]
