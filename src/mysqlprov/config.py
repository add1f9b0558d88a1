"""Immutable configuration for the dump-import pipeline."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Any

from mysqlprov.errors import ValidationError
from mysqlprov.models import ConnectionInfo, FetchSpec, StagingPaths

DEFAULT_NAMESPACE = "mysqlprov"
ROOT_PASSWORD_ENV = "MYSQLPROV_ROOT_PASSWORD"
PRIVATE_KEY_ENV = "MYSQLPROV_PRIVATE_KEY"

_PATH_KEYS = ("key_file", "ssh_wrapper", "destination", "sentinel_root")


@dataclass(frozen=True, slots=True)
class ImportConfig:
    repository: str
    revision: str
    dump_file: str
    database_root_password: str = field(repr=False)
    private_key: str | None = field(default=None, repr=False)
    namespace: str = DEFAULT_NAMESPACE
    database_host: str = "localhost"
    database_user: str = "root"
    paths: StagingPaths = field(default_factory=StagingPaths)

    def __post_init__(self) -> None:
        _validate_dump_file(self.dump_file)
        if not self.namespace or "/" in self.namespace:
            raise ValidationError(
                "Invalid namespace.",
                hint="Use a plain directory name such as `mysqlprov`.",
                context={"field": "namespace", "value": self.namespace},
            )

    @classmethod
    def from_mapping(
        cls,
        payload: Mapping[str, Any],
        *,
        environ: Mapping[str, str] | None = None,
    ) -> ImportConfig:
        env = os.environ if environ is None else environ
        values = dict(payload)
        if "database_root_password" not in values and env.get(ROOT_PASSWORD_ENV):
            values["database_root_password"] = env[ROOT_PASSWORD_ENV]
        if values.get("private_key") is None and env.get(PRIVATE_KEY_ENV):
            values["private_key"] = env[PRIVATE_KEY_ENV]

        return cls(
            repository=_required_str(values, "repository"),
            revision=_required_str(values, "revision"),
            dump_file=_required_str(values, "dump_file"),
            database_root_password=_required_str(values, "database_root_password"),
            private_key=_optional_str(values, "private_key"),
            namespace=_optional_str(values, "namespace") or DEFAULT_NAMESPACE,
            database_host=_optional_str(values, "database_host") or "localhost",
            database_user=_optional_str(values, "database_user") or "root",
            paths=_parse_paths(values.get("paths")),
        )

    @classmethod
    def from_json_file(
        cls,
        path: str | Path,
        *,
        environ: Mapping[str, str] | None = None,
    ) -> ImportConfig:
        config_path = Path(path)
        try:
            raw = config_path.read_text(encoding="utf-8")
        except FileNotFoundError as exc:
            raise ValidationError(
                "Configuration file does not exist.",
                context={"path": str(config_path)},
            ) from exc
        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValidationError(
                "Configuration file is not valid JSON.",
                hint=str(exc),
                context={"path": str(config_path)},
            ) from exc
        if not isinstance(payload, dict):
            raise ValidationError(
                "Configuration file must contain a JSON object.",
                context={"path": str(config_path)},
            )
        return cls.from_mapping(payload, environ=environ)

    def connection(self) -> ConnectionInfo:
        return ConnectionInfo(
            host=self.database_host,
            user=self.database_user,
            password=self.database_root_password,
        )

    def fetch_spec(self) -> FetchSpec:
        return FetchSpec(
            repository=self.repository,
            revision=self.revision,
            destination=self.paths.destination,
        )

    def artifact_path(self) -> Path:
        return self.paths.destination / self.dump_file

    def sentinel_dir(self) -> Path:
        return self.paths.sentinel_dir(self.namespace)


def _validate_dump_file(dump_file: str) -> None:
    relative = PurePosixPath(dump_file)
    if relative.is_absolute() or ".." in relative.parts or not relative.name:
        raise ValidationError(
            "dump_file must be a relative path inside the checkout.",
            context={"field": "dump_file", "value": dump_file},
        )


def _parse_paths(raw: object) -> StagingPaths:
    if raw is None:
        return StagingPaths()
    if not isinstance(raw, Mapping):
        raise ValidationError("Invalid configuration `paths` value.", context={"field": "paths"})
    unknown = sorted(set(raw) - set(_PATH_KEYS))
    if unknown:
        raise ValidationError(
            "Unknown keys in configuration `paths`.",
            context={"field": "paths", "keys": ", ".join(unknown)},
        )
    overrides = {key: Path(_required_str(raw, key)) for key in _PATH_KEYS if key in raw}
    return StagingPaths(**overrides)


def _required_str(payload: Mapping[str, Any], key: str) -> str:
    value = payload.get(key)
    if not isinstance(value, str) or not value:
        raise ValidationError(
            f"Missing or invalid configuration `{key}` value.",
            context={"field": key},
        )
    return value


def _optional_str(payload: Mapping[str, Any], key: str) -> str | None:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(
            f"Invalid configuration `{key}` value.",
            context={"field": key},
        )
    return value or None
