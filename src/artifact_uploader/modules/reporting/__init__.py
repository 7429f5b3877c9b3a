"""Run status reporting."""

from .actions_reporter import ActionsReporter

__all__ = ["ActionsReporter"]
