"""Concrete collaborators plugged into the upload orchestrator."""

from .discovery.finder import GlobFileFinder
from .reporting.actions_reporter import ActionsReporter
from .storage.s3_client import S3StorageClient

__all__ = ["ActionsReporter", "GlobFileFinder", "S3StorageClient"]
