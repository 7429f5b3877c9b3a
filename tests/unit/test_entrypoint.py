from pathlib import Path

import pytest

from artifact_uploader.core.config import ConfigService
from artifact_uploader.core.errors import DiscoveryError
from artifact_uploader.entrypoint import main, run_upload
from artifact_uploader.modules.discovery.finder import GlobFileFinder
from artifact_uploader.modules.reporting.actions_reporter import ActionsReporter


@pytest.fixture
def quiet_reporter() -> ActionsReporter:
    return ActionsReporter(annotate=False)


def test_main_uploads_discovered_files(action_environ, storage, quiet_reporter) -> None:
    code = main(
        [],
        environ=action_environ,
        storage_factory=lambda snapshot: storage,
        reporter=quiet_reporter,
    )

    assert code == 0
    assert [key for key, _, _ in storage.puts] == [
        "octo/widgets/4242/build-output/app.bin",
        "octo/widgets/4242/build-output/docs/index.html",
        "octo/widgets/4242/build-output/docs/notes.log",
    ]
    assert not quiet_reporter.failed


def test_cli_flags_override_action_inputs(action_environ, storage, quiet_reporter) -> None:
    seen = {}

    def factory(snapshot):
        seen["bucket"] = snapshot.inputs.s3_bucket
        return storage

    code = main(
        ["--bucket", "cli-bucket", "--name", "from-cli", "--run-id", "7"],
        environ=action_environ,
        storage_factory=factory,
        reporter=quiet_reporter,
    )

    assert code == 0
    assert seen["bucket"] == "cli-bucket"
    assert storage.puts[0][0].startswith("octo/widgets/7/from-cli/")


def test_no_files_with_error_option_fails_run(
    tmp_path: Path, action_environ, storage, quiet_reporter
) -> None:
    env = {**action_environ, "INPUT_PATH": str(tmp_path / "missing" / "*.zip")}

    code = main([], environ=env, storage_factory=lambda snapshot: storage, reporter=quiet_reporter)

    assert code == 1
    assert storage.puts == []
    assert "No files were found" in (quiet_reporter.failure_message or "")


def test_no_files_with_warn_option_succeeds(
    tmp_path: Path, action_environ, storage, quiet_reporter
) -> None:
    env = {
        **action_environ,
        "INPUT_PATH": str(tmp_path / "missing" / "*.zip"),
        "INPUT_IF-NO-FILES-FOUND": "warn",
    }

    code = main([], environ=env, storage_factory=lambda snapshot: storage, reporter=quiet_reporter)

    assert code == 0
    assert storage.puts == []


def test_upload_failure_sets_failed(action_environ, make_storage, quiet_reporter) -> None:
    storage = make_storage(fail_on={"octo/widgets/4242/build-output/docs/index.html"})

    code = main(
        [],
        environ=action_environ,
        storage_factory=lambda snapshot: storage,
        reporter=quiet_reporter,
    )

    assert code == 1
    assert len(storage.puts) == 2
    assert quiet_reporter.failure_message == (
        "simulated failure for octo/widgets/4242/build-output/docs/index.html"
    )


def test_configuration_error_exits_with_code_two(action_environ, quiet_reporter) -> None:
    env = dict(action_environ)
    env.pop("INPUT_REGION")

    code = main([], environ=env, storage_factory=lambda snapshot: None, reporter=quiet_reporter)

    assert code == 2
    assert quiet_reporter.failed


def test_discovery_error_fails_run(action_environ, storage, quiet_reporter) -> None:
    env = {**action_environ, "INPUT_PATH": "!only-excludes"}

    code = main([], environ=env, storage_factory=lambda snapshot: storage, reporter=quiet_reporter)

    assert code == 1
    assert storage.puts == []


def test_run_upload_propagates_discovery_errors(action_environ, storage, reporter) -> None:
    snapshot = ConfigService(environ={**action_environ, "INPUT_PATH": "!nothing"}).snapshot

    with pytest.raises(DiscoveryError):
        run_upload(snapshot, finder=GlobFileFinder(), storage=storage, reporter=reporter)
    assert reporter.messages["failed"] == []
