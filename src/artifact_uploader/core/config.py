"""
Dynaconf-powered configuration loader with Pydantic validation.

Inputs are layered from lowest to highest precedence:

1. optional `config.yaml` / `secrets.yaml` files (plus `ARTIFACT_UPLOADER_*`
   environment overrides) loaded through Dynaconf,
2. GitHub Actions step inputs exposed as `INPUT_<NAME>` environment variables,
3. explicit overrides passed by the CLI.

The merged mapping is validated into a `ConfigSnapshot`; any validation
problem surfaces as a single `ConfigurationError`.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from dynaconf import Dynaconf
from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from .contracts import ArtifactIdentity, RetentionConfig
from .errors import ConfigurationError
from .no_files import NoFileOptions


def _section(raw: Mapping[str, Any], key: str) -> dict[str, Any]:
    """Case-insensitive dictionary lookup helper."""
    value = raw.get(key) or raw.get(key.upper()) or raw.get(key.lower())
    if isinstance(value, Mapping):
        return dict(value)
    return {}


def _deep_merge(base: dict[str, Any], updates: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge dictionaries without mutating the originals."""
    result: dict[str, Any] = {**base}
    for key, value in updates.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, Mapping):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


CONFIG_FILENAMES = ("config.yaml", "secrets.yaml")
ENVVAR_PREFIX = "ARTIFACT_UPLOADER"

# Action input name -> UploadInputs field.
ACTION_INPUTS: dict[str, str] = {
    "path": "search_path",
    "name": "artifact_name",
    "s3-bucket": "s3_bucket",
    "region": "region",
    "retention-days": "retention_days",
    "if-no-files-found": "if_no_files_found",
}


def _input_env_name(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


class UploadInputs(BaseModel):
    """User-supplied inputs of one upload step."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    search_path: str = Field(validation_alias=AliasChoices("search_path", "path"))
    artifact_name: str = Field(
        default="artifact", validation_alias=AliasChoices("artifact_name", "name")
    )
    s3_bucket: str = Field(validation_alias=AliasChoices("s3_bucket", "bucket"))
    region: str
    retention_days: int | None = Field(default=None)
    if_no_files_found: NoFileOptions = Field(default=NoFileOptions.WARN)

    @field_validator("search_path", "s3_bucket", "region")
    @classmethod
    def _required_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("value must not be empty")
        return value

    @field_validator("artifact_name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return "artifact"
        return value

    @field_validator("retention_days", mode="before")
    @classmethod
    def _parse_retention(cls, value: Any) -> Any:
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            try:
                return int(value)
            except ValueError as exc:
                raise ValueError(f"Invalid retention-days: {value}") from exc
        return value

    @field_validator("if_no_files_found", mode="before")
    @classmethod
    def _parse_no_files(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return NoFileOptions.WARN
        try:
            return NoFileOptions.parse(value)
        except ConfigurationError as exc:
            raise ValueError(str(exc)) from exc

    @property
    def retention(self) -> RetentionConfig:
        return RetentionConfig(days=self.retention_days)


class TransferSettings(BaseModel):
    """boto3 transfer and retry tuning."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    part_size_mb: float = Field(default=10.0, ge=5.0)
    queue_size: int = Field(default=5, ge=1)
    max_retries: int = Field(default=10, ge=0)
    endpoint_url: str | None = Field(default=None)
    aws_access_key_id: str | None = Field(default=None)
    aws_secret_access_key: str | None = Field(default=None)
    aws_session_token: str | None = Field(default=None)

    @property
    def part_size_bytes(self) -> int:
        return int(self.part_size_mb * 1024 * 1024)


class RunContext(BaseModel):
    """Repository and run identifiers of the enclosing workflow."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    owner: str
    repo: str
    run_id: str

    @field_validator("run_id", mode="before")
    @classmethod
    def _coerce_run_id(cls, value: Any) -> str:
        text = str(value).strip() if value is not None else ""
        if not text:
            raise ValueError("run_id must not be empty")
        return text

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> dict[str, Any]:
        """Extract raw context values from GitHub Actions environment variables."""
        data: dict[str, Any] = {}
        repository = environ.get("GITHUB_REPOSITORY", "").strip()
        if repository:
            owner, sep, repo = repository.partition("/")
            if not sep or not owner or not repo or "/" in repo:
                raise ConfigurationError(
                    f"GITHUB_REPOSITORY must look like 'owner/repo', got '{repository}'"
                )
            data["owner"] = owner
            data["repo"] = repo
        run_id = environ.get("GITHUB_RUN_ID", "").strip()
        if run_id:
            data["run_id"] = run_id
        return data


class ConfigSnapshot(BaseModel):
    """Validated configuration for one run."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    inputs: UploadInputs
    transfer: TransferSettings = Field(default_factory=TransferSettings)
    context: RunContext

    @property
    def identity(self) -> ArtifactIdentity:
        return ArtifactIdentity(
            owner=self.context.owner,
            repo=self.context.repo,
            run_id=self.context.run_id,
            artifact_name=self.inputs.artifact_name,
        )


class ConfigService:
    """
    Runtime facade for loading, validating, and distributing configuration.

    Implements the inputs-provider role: `inputs()` returns the validated
    step inputs, `snapshot` the full configuration.
    """

    def __init__(
        self,
        *,
        config_dir: str | Path | None = None,
        environ: Mapping[str, str] | None = None,
        overrides: Mapping[str, Any] | None = None,
        settings: Dynaconf | None = None,
    ) -> None:
        self._config_dir = Path(config_dir) if config_dir else None
        self._environ = dict(os.environ if environ is None else environ)
        self._overrides = dict(overrides or {})
        if settings is None:
            settings = Dynaconf(
                envvar_prefix=ENVVAR_PREFIX,
                settings_files=self._settings_files(),
                environments=False,
                merge_enabled=True,
                load_dotenv=False,
            )
        self._settings = settings
        self._snapshot = self._build_snapshot()

    @property
    def snapshot(self) -> ConfigSnapshot:
        """Latest validated configuration snapshot."""
        return self._snapshot

    def inputs(self) -> UploadInputs:
        return self._snapshot.inputs

    def _settings_files(self) -> list[str]:
        if self._config_dir is None:
            return []
        if not self._config_dir.is_dir():
            raise ConfigurationError(f"Configuration directory {self._config_dir} does not exist.")
        return [
            str(self._config_dir / name)
            for name in CONFIG_FILENAMES
            if (self._config_dir / name).exists()
        ]

    def _action_inputs(self) -> dict[str, Any]:
        data: dict[str, Any] = {}
        for name, field_name in ACTION_INPUTS.items():
            value = self._environ.get(_input_env_name(name))
            if value is not None and value.strip():
                data[field_name] = value.strip()
        return data

    def _build_snapshot(self) -> ConfigSnapshot:
        raw = {key.lower(): value for key, value in self._settings.as_dict().items()}
        data = {
            "inputs": _section(raw, "inputs"),
            "transfer": _section(raw, "transfer"),
            "context": _section(raw, "context"),
        }
        data = _deep_merge(
            data,
            {
                "inputs": self._action_inputs(),
                "context": RunContext.from_environ(self._environ),
            },
        )
        data = _deep_merge(data, self._overrides)
        try:
            return ConfigSnapshot.model_validate(data)
        except ValidationError as exc:
            raise ConfigurationError(f"Configuration validation failed: {exc}") from exc


__all__ = [
    "ACTION_INPUTS",
    "CONFIG_FILENAMES",
    "ConfigService",
    "ConfigSnapshot",
    "RunContext",
    "TransferSettings",
    "UploadInputs",
]
