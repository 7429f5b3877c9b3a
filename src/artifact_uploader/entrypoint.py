"""
CLI entrypoint that uploads one artifact and reports the outcome.

Configuration comes from optional YAML files, GitHub Actions step inputs, and
the command line (highest precedence). The process exit code mirrors the run:
0 on success, 1 when the upload or discovery failed (or no files were found
with `if-no-files-found: error`), 2 when configuration is invalid.
"""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import os
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import Any

from .core.config import ConfigService, ConfigSnapshot
from .core.contracts import FileFinder, PipelineResult, Reporter, StorageClient
from .core.errors import ArtifactUploadError, ConfigurationError
from .core.no_files import NoFileOptions
from .core.orchestrator import UploadOrchestrator
from .core.retention import RetentionPolicy
from .modules import ActionsReporter, GlobFileFinder, S3StorageClient

LOGGER = logging.getLogger(__name__)
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2

StorageFactory = Callable[[ConfigSnapshot], StorageClient]


def _ensure_rotating_file_handler(
    log_file: Path,
    *,
    max_mb: int = 10,
    backup_count: int = 3,
) -> None:
    """Attach a rotating file handler pointed at ``log_file`` if missing."""

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        LOGGER.warning("Unable to create log directory %s: %s", log_file.parent, exc)
        return

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        if isinstance(handler, logging.handlers.RotatingFileHandler):
            existing = getattr(handler, "baseFilename", None)
            if existing and Path(existing) == log_file.resolve():
                return

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=max_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def configure_logging(level: str, *, log_file: Path | None = None) -> None:
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(
        level=numeric_level,
        format=LOG_FORMAT,
    )
    if log_file is not None:
        _ensure_rotating_file_handler(log_file)


def default_storage_factory(snapshot: ConfigSnapshot) -> StorageClient:
    return S3StorageClient(
        bucket=snapshot.inputs.s3_bucket,
        region=snapshot.inputs.region,
        settings=snapshot.transfer,
    )


def run_upload(
    snapshot: ConfigSnapshot,
    *,
    finder: FileFinder,
    storage: StorageClient,
    reporter: Reporter,
    retention_policy: RetentionPolicy | None = None,
) -> PipelineResult:
    """
    Discover files and upload them as one artifact.

    Discovery errors propagate unchanged. A failed pipeline result is turned
    into a single `set_failed` call on the reporter.
    """

    inputs = snapshot.inputs
    file_set = finder.find(inputs.search_path)
    orchestrator = UploadOrchestrator(storage, reporter, retention_policy=retention_policy)
    result = orchestrator.run(
        file_set,
        snapshot.identity,
        inputs.retention,
        if_no_files_found=inputs.if_no_files_found,
        search_path=inputs.search_path,
    )
    if result.any_failed:
        reporter.set_failed(result.first_failure or "Artifact upload failed")
    else:
        LOGGER.info(
            "Artifact %s uploaded: %d file(s) to %s",
            inputs.artifact_name,
            result.uploaded,
            inputs.s3_bucket,
        )
    return result


def _cli_overrides(args: argparse.Namespace) -> dict[str, Any]:
    inputs = {
        "search_path": args.path,
        "artifact_name": args.name,
        "s3_bucket": args.bucket,
        "region": args.region,
        "retention_days": args.retention_days,
        "if_no_files_found": args.if_no_files_found,
    }
    context = {"owner": args.owner, "repo": args.repo, "run_id": args.run_id}
    overrides: dict[str, Any] = {}
    selected_inputs = {key: value for key, value in inputs.items() if value is not None}
    selected_context = {key: value for key, value in context.items() if value is not None}
    if selected_inputs:
        overrides["inputs"] = selected_inputs
    if selected_context:
        overrides["context"] = selected_context
    return overrides


def parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Upload workflow artifacts to S3.")
    parser.add_argument(
        "--config-dir",
        type=Path,
        default=None,
        help="Directory that contains config.yaml/secrets.yaml (optional).",
    )
    parser.add_argument("--path", default=None, help="Search path; one pattern per line.")
    parser.add_argument("--name", default=None, help="Artifact name (default: artifact).")
    parser.add_argument("--bucket", default=None, help="Destination S3 bucket.")
    parser.add_argument("--region", default=None, help="AWS region of the bucket.")
    parser.add_argument(
        "--retention-days",
        type=int,
        default=None,
        help="Days until uploaded objects expire (default: 90).",
    )
    parser.add_argument(
        "--if-no-files-found",
        choices=[option.value for option in NoFileOptions],
        default=None,
        help="Behaviour when the search path matches nothing (default: warn).",
    )
    parser.add_argument("--owner", default=None, help="Repository owner (default: from env).")
    parser.add_argument("--repo", default=None, help="Repository name (default: from env).")
    parser.add_argument("--run-id", default=None, help="Workflow run id (default: from env).")
    parser.add_argument(
        "--log-level",
        default=None,
        help="Python logging level (default: INFO, DEBUG when RUNNER_DEBUG=1).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write logs to this rotating file.",
    )
    return parser.parse_args(argv)


def main(
    argv: Sequence[str] | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    storage_factory: StorageFactory | None = None,
    finder: FileFinder | None = None,
    reporter: ActionsReporter | None = None,
) -> int:
    env = dict(os.environ if environ is None else environ)
    args = parse_args(argv)
    level = args.log_level or ("DEBUG" if env.get("RUNNER_DEBUG") == "1" else "INFO")
    configure_logging(level, log_file=args.log_file)
    reporter = reporter or ActionsReporter(environ=env)

    try:
        snapshot = ConfigService(
            config_dir=args.config_dir,
            environ=env,
            overrides=_cli_overrides(args),
        ).snapshot
    except ConfigurationError as exc:
        LOGGER.debug("Configuration failed", exc_info=True)
        reporter.set_failed(str(exc))
        return EXIT_CONFIG

    try:
        storage = (storage_factory or default_storage_factory)(snapshot)
        run_upload(
            snapshot,
            finder=finder or GlobFileFinder(),
            storage=storage,
            reporter=reporter,
        )
    except ConfigurationError as exc:
        reporter.set_failed(str(exc))
        return EXIT_CONFIG
    except ArtifactUploadError as exc:
        LOGGER.debug("Artifact upload aborted", exc_info=True)
        reporter.set_failed(str(exc))
        return EXIT_FAILED
    except Exception as exc:  # pragma: no cover - surfaced to operator
        LOGGER.exception("Artifact uploader crashed.")
        reporter.set_failed(str(exc) or exc.__class__.__name__)
        return EXIT_FAILED
    return reporter.exit_code


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())


__all__ = ["configure_logging", "main", "parse_args", "run_upload"]
