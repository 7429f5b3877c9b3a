"""
Behaviour selection for runs where the search path matched nothing.

Each configured option maps to a `(ReportLevel, TerminalOutcome)` pair via a
lookup table; the orchestrator consults it once and never re-checks emptiness.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from .contracts import Reporter
from .errors import ConfigurationError


class NoFileOptions(enum.StrEnum):
    WARN = "warn"
    ERROR = "error"
    IGNORE = "ignore"

    @classmethod
    def parse(cls, value: Any) -> NoFileOptions:
        if isinstance(value, cls):
            return value
        normalised = str(value).strip().lower()
        try:
            return cls(normalised)
        except ValueError as exc:
            allowed = ", ".join(option.value for option in cls)
            raise ConfigurationError(
                f"Unrecognized if-no-files-found input. Provided: {value}. "
                f"Available options: {allowed}"
            ) from exc


class ReportLevel(enum.StrEnum):
    INFO = "info"
    WARNING = "warning"
    FAILURE = "failure"


class TerminalOutcome(enum.StrEnum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class NoFilesDecision:
    level: ReportLevel
    outcome: TerminalOutcome
    message: str

    @property
    def failed(self) -> bool:
        return self.outcome is TerminalOutcome.FAILED


_DECISIONS: dict[NoFileOptions, tuple[ReportLevel, TerminalOutcome]] = {
    NoFileOptions.WARN: (ReportLevel.WARNING, TerminalOutcome.SUCCESS),
    NoFileOptions.ERROR: (ReportLevel.FAILURE, TerminalOutcome.FAILED),
    NoFileOptions.IGNORE: (ReportLevel.INFO, TerminalOutcome.SUCCESS),
}


def no_files_message(search_path: str) -> str:
    return (
        f"No files were found with the provided path: {search_path}. "
        "No artifacts will be uploaded."
    )


def resolve_no_files(option: NoFileOptions | str, search_path: str) -> NoFilesDecision:
    """Map the configured option to the report level and terminal outcome."""
    level, outcome = _DECISIONS[NoFileOptions.parse(option)]
    return NoFilesDecision(level=level, outcome=outcome, message=no_files_message(search_path))


def apply_no_files_decision(decision: NoFilesDecision, reporter: Reporter) -> None:
    """
    Emit the report for non-fatal decisions.

    Failures are not reported here: they travel in the pipeline result and
    the entrypoint marks the run failed exactly once.
    """

    if decision.level is ReportLevel.WARNING:
        reporter.warning(decision.message)
    elif decision.level is ReportLevel.INFO:
        reporter.info(decision.message)


__all__ = [
    "NoFileOptions",
    "NoFilesDecision",
    "ReportLevel",
    "TerminalOutcome",
    "apply_no_files_decision",
    "no_files_message",
    "resolve_no_files",
]
