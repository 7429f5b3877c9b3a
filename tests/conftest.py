from __future__ import annotations

import textwrap
from pathlib import Path
from typing import IO

import pytest

from artifact_uploader.core.contracts import ObjectMetadata
from artifact_uploader.core.errors import TransportError


def _write_yaml(path: Path, content: str) -> None:
    path.write_text(textwrap.dedent(content).strip() + "\n", encoding="utf-8")


class RecordingReporter:
    """Reporter double that keeps every message per level."""

    def __init__(self) -> None:
        self.messages: dict[str, list[str]] = {
            "info": [],
            "warning": [],
            "error": [],
            "debug": [],
            "failed": [],
        }

    def info(self, message: str) -> None:
        self.messages["info"].append(message)

    def warning(self, message: str) -> None:
        self.messages["warning"].append(message)

    def error(self, message: str) -> None:
        self.messages["error"].append(message)

    def debug(self, message: str) -> None:
        self.messages["debug"].append(message)

    def set_failed(self, message: str) -> None:
        self.messages["failed"].append(message)


class StubStorage:
    """Storage double recording puts; fails on the keys listed in `fail_on`."""

    def __init__(self, fail_on: set[str] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.puts: list[tuple[str, bytes, ObjectMetadata]] = []
        self.sources: list[IO[bytes]] = []
        self.open_before_put: list[int] = []

    def put(self, object_key: str, source: IO[bytes], metadata: ObjectMetadata) -> None:
        self.open_before_put.append(sum(1 for handle in self.sources if not handle.closed))
        self.sources.append(source)
        self.puts.append((object_key, source.read(), metadata))
        if object_key in self.fail_on:
            raise TransportError(f"simulated failure for {object_key}")


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def storage() -> StubStorage:
    return StubStorage()


@pytest.fixture
def artifact_dir(tmp_path: Path) -> Path:
    """A small directory tree to upload."""

    root = tmp_path / "dist"
    (root / "docs").mkdir(parents=True)
    (root / "app.bin").write_bytes(b"binary")
    (root / "docs" / "index.html").write_text("<html></html>", encoding="utf-8")
    (root / "docs" / "notes.log").write_text("log", encoding="utf-8")
    return root


@pytest.fixture
def action_environ(artifact_dir: Path) -> dict[str, str]:
    """Environment as seen by a GitHub Actions step."""

    return {
        "GITHUB_REPOSITORY": "octo/widgets",
        "GITHUB_RUN_ID": "4242",
        "INPUT_PATH": str(artifact_dir),
        "INPUT_NAME": "build-output",
        "INPUT_S3-BUCKET": "artifacts-bucket",
        "INPUT_REGION": "eu-west-1",
        "INPUT_RETENTION-DAYS": "14",
        "INPUT_IF-NO-FILES-FOUND": "error",
    }


@pytest.fixture
def sample_config_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary configuration directory for tests.
    """

    config_dir = tmp_path / "config"
    config_dir.mkdir()
    config_yaml = """
    inputs:
      path: "build/**/*.txt"
      name: "nightly"
      s3_bucket: "yaml-bucket"
      region: "us-east-2"
      retention_days: 30
      if_no_files_found: "ignore"

    transfer:
      part_size_mb: 16
      queue_size: 3
      max_retries: 4
      endpoint_url: "http://localhost:9000"

    context:
      owner: "yaml-owner"
      repo: "yaml-repo"
      run_id: 77
    """
    secrets_yaml = """
    transfer:
      aws_access_key_id: "AKIAEXAMPLE"
      aws_secret_access_key: "secret"
    """
    _write_yaml(config_dir / "config.yaml", config_yaml)
    _write_yaml(config_dir / "secrets.yaml", secrets_yaml)
    return config_dir


@pytest.fixture
def make_storage() -> type[StubStorage]:
    return StubStorage
