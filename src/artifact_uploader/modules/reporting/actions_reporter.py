"""
Reporter that writes to the Python log and, inside GitHub Actions, emits
workflow commands so warnings and errors show up as run annotations.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from typing import TextIO

logger = logging.getLogger(__name__)


def _escape_data(message: str) -> str:
    return message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionsReporter:
    """Status surface for the enclosing workflow run."""

    def __init__(
        self,
        *,
        annotate: bool | None = None,
        stream: TextIO | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        env = os.environ if environ is None else environ
        if annotate is None:
            annotate = env.get("GITHUB_ACTIONS", "").lower() == "true"
        self._annotate = annotate
        self._stream = stream
        self._failures: list[str] = []

    @property
    def failed(self) -> bool:
        return bool(self._failures)

    @property
    def failure_message(self) -> str | None:
        return self._failures[0] if self._failures else None

    @property
    def exit_code(self) -> int:
        return 1 if self._failures else 0

    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        self._emit(logging.WARNING, "warning", message)

    def error(self, message: str) -> None:
        self._emit(logging.ERROR, "error", message)

    def debug(self, message: str) -> None:
        logger.debug(message)
        self._command("debug", message)

    def set_failed(self, message: str) -> None:
        """Mark the run failed; the first message wins for the exit summary."""
        self._failures.append(message)
        self._emit(logging.ERROR, "error", message)

    def _emit(self, level: int, command: str, message: str) -> None:
        # Annotated messages reach the run log through the workflow command.
        logger.log(logging.DEBUG if self._annotate else level, message)
        self._command(command, message)

    def _command(self, name: str, message: str) -> None:
        if not self._annotate:
            return
        stream = self._stream or sys.stdout
        stream.write(f"::{name}::{_escape_data(message)}\n")
        stream.flush()


__all__ = ["ActionsReporter"]
