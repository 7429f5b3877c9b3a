import pytest

from artifact_uploader.core.errors import ConfigurationError
from artifact_uploader.core.no_files import (
    NoFileOptions,
    ReportLevel,
    TerminalOutcome,
    apply_no_files_decision,
    resolve_no_files,
)


@pytest.mark.parametrize(
    ("option", "level", "outcome"),
    [
        (NoFileOptions.WARN, ReportLevel.WARNING, TerminalOutcome.SUCCESS),
        (NoFileOptions.ERROR, ReportLevel.FAILURE, TerminalOutcome.FAILED),
        (NoFileOptions.IGNORE, ReportLevel.INFO, TerminalOutcome.SUCCESS),
    ],
)
def test_each_option_maps_to_level_and_outcome(option, level, outcome) -> None:
    decision = resolve_no_files(option, "dist/")
    assert decision.level is level
    assert decision.outcome is outcome
    assert decision.message == (
        "No files were found with the provided path: dist/. No artifacts will be uploaded."
    )


def test_option_strings_are_parsed_case_insensitively() -> None:
    assert resolve_no_files(" Error ", "x").failed


def test_unknown_option_is_a_configuration_error() -> None:
    with pytest.raises(ConfigurationError, match="if-no-files-found"):
        resolve_no_files("explode", "x")


def test_apply_reports_only_non_fatal_branches(reporter) -> None:
    apply_no_files_decision(resolve_no_files("warn", "a"), reporter)
    apply_no_files_decision(resolve_no_files("ignore", "b"), reporter)
    apply_no_files_decision(resolve_no_files("error", "c"), reporter)

    assert len(reporter.messages["warning"]) == 1
    assert "a." in reporter.messages["warning"][0]
    assert len(reporter.messages["info"]) == 1
    assert "b." in reporter.messages["info"][0]
    assert reporter.messages["error"] == []
    assert reporter.messages["failed"] == []
