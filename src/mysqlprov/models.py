"""Core typed dataclasses shared by the dump-import steps."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from pathlib import Path

DEFAULT_KEY_FILE = Path("/tmp/git_key")
DEFAULT_SSH_WRAPPER = Path("/tmp/git_ssh.sh")
DEFAULT_DESTINATION = Path("/tmp/git_download")
DEFAULT_SENTINEL_ROOT = Path("/var/lib")


@dataclass(frozen=True, slots=True)
class StagingPaths:
    key_file: Path = DEFAULT_KEY_FILE
    ssh_wrapper: Path = DEFAULT_SSH_WRAPPER
    destination: Path = DEFAULT_DESTINATION
    sentinel_root: Path = DEFAULT_SENTINEL_ROOT

    def sentinel_dir(self, namespace: str) -> Path:
        return self.sentinel_root / namespace


@dataclass(frozen=True, slots=True)
class ConnectionInfo:
    host: str = "localhost"
    user: str = "root"
    password: str = field(default="", repr=False)


@dataclass(frozen=True, slots=True)
class FetchSpec:
    repository: str
    revision: str
    destination: Path


@dataclass(frozen=True, slots=True)
class CredentialHandle:
    key_file: Path
    ssh_wrapper: Path


@dataclass(frozen=True, slots=True)
class Sentinel:
    key: str
    path: Path
    created_at: datetime


@dataclass(frozen=True, slots=True)
class DatabaseTarget:
    name: str
    connection: ConnectionInfo


class ImportOutcome(StrEnum):
    SKIPPED = "skipped"
    IMPORTED = "imported"


@dataclass(frozen=True, slots=True)
class ImportResult:
    outcome: ImportOutcome
    artifact: Path
    sentinel: Sentinel | None
