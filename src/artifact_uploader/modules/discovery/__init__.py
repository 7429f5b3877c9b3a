"""File discovery for artifact search paths."""

from .finder import GlobFileFinder

__all__ = ["GlobFileFinder"]
