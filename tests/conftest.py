"""Shared test fixtures."""

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path

import pytest

from mysqlprov.loader import InProcessLoader
from mysqlprov.models import StagingPaths
from mysqlprov.observability import StructuredLogger


@dataclass(frozen=True)
class GitRepo:
    path: Path
    commit: str

    def add_file(self, relative: str, payload: bytes) -> str:
        target = self.path / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(payload)
        run_git(["add", relative], cwd=self.path)
        run_git(["commit", "-m", f"add {relative}"], cwd=self.path)
        return run_git(["rev-parse", "HEAD"], cwd=self.path)


@pytest.fixture
def logger() -> StructuredLogger:
    return StructuredLogger()


@pytest.fixture
def inprocess_loader() -> InProcessLoader:
    """Provide a loader that records payloads instead of calling mysql."""
    return InProcessLoader()


@pytest.fixture
def staging_paths(tmp_path: Path) -> StagingPaths:
    return StagingPaths(
        key_file=tmp_path / "tmp" / "git_key",
        ssh_wrapper=tmp_path / "tmp" / "git_ssh.sh",
        destination=tmp_path / "tmp" / "git_download",
        sentinel_root=tmp_path / "var" / "lib",
    )


@pytest.fixture
def git_repo(tmp_path: Path) -> GitRepo:
    path = tmp_path / "origin"
    path.mkdir(parents=True)
    run_git(["init", "--initial-branch=main"], cwd=path)
    run_git(["config", "user.email", "mysqlprov@example.com"], cwd=path)
    run_git(["config", "user.name", "mysqlprov test"], cwd=path)
    run_git(["config", "commit.gpgsign", "false"], cwd=path)
    (path / "README.md").write_text("dumps\n", encoding="utf-8")
    run_git(["add", "README.md"], cwd=path)
    run_git(["commit", "-m", "initial"], cwd=path)
    return GitRepo(path=path, commit=run_git(["rev-parse", "HEAD"], cwd=path))


def run_git(argv: list[str], *, cwd: Path) -> str:
    completed = subprocess.run(
        ["git", *argv],
        cwd=cwd,
        check=False,
        text=True,
        capture_output=True,
    )
    if completed.returncode != 0:
        raise RuntimeError(f"git {' '.join(argv)} failed: {completed.stderr.strip()}")
    return completed.stdout.strip()
