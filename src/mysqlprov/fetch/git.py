"""Git checkout of a pinned revision, optionally through a staged SSH wrapper."""

from __future__ import annotations

import os
import shutil
import subprocess
from pathlib import Path

from mysqlprov.errors import FetchError
from mysqlprov.models import CredentialHandle, FetchSpec
from mysqlprov.observability import StructuredLogger


def fetch_git(
    spec: FetchSpec,
    credential: CredentialHandle | None = None,
    *,
    logger: StructuredLogger,
) -> Path:
    """Check out ``spec.revision`` of ``spec.repository`` into ``spec.destination``."""
    if not spec.repository or not spec.revision:
        raise FetchError(
            "fetch_git() requires a repository and a revision.",
            context={"repository": spec.repository, "revision": spec.revision},
        )
    env = _git_env(credential)
    destination = spec.destination
    if destination.exists() or destination.is_symlink():
        logger.log(
            operation="fetch_git",
            step="fetch",
            level="warning",
            message=f"Removing leftover checkout at {destination}.",
        )
        _remove_leftover(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    logger.log(
        operation="fetch_git",
        step="fetch",
        message=f"Fetching {spec.repository} at {spec.revision}.",
        extra={"ssh_wrapper": str(credential.ssh_wrapper) if credential else None},
    )
    _run_git(["clone", "--quiet", spec.repository, str(destination)], env=env)
    _run_git(["checkout", "--quiet", spec.revision], cwd=destination, env=env)
    commit = _run_git(["rev-parse", "HEAD"], cwd=destination, env=env)
    logger.log(
        operation="fetch_git",
        step="fetch",
        message=f"Checked out {commit} into {destination}.",
        extra={"commit": commit},
    )
    return destination


def _remove_leftover(destination: Path) -> None:
    try:
        if destination.is_dir() and not destination.is_symlink():
            shutil.rmtree(destination)
        else:
            destination.unlink()
    except OSError as exc:
        raise FetchError(
            "Could not remove leftover checkout.",
            hint="Remove the scratch destination by hand before retrying.",
            context={"operation": "fetch_git", "destination": str(destination), "error": str(exc)},
        ) from exc


def _git_env(credential: CredentialHandle | None) -> dict[str, str] | None:
    if credential is None:
        return None
    env = dict(os.environ)
    env["GIT_SSH"] = str(credential.ssh_wrapper)
    return env


def _run_git(
    argv: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> str:
    command = ["git", *argv]
    try:
        completed = subprocess.run(
            command,
            cwd=cwd,
            env=env,
            check=False,
            text=True,
            capture_output=True,
        )
    except FileNotFoundError as exc:
        raise FetchError(
            "git executable not found.",
            hint="Install git before importing a dump.",
            context={"operation": "fetch_git", "argv": " ".join(command)},
        ) from exc
    if completed.returncode != 0:
        raise FetchError(
            "Git command failed.",
            hint="Check the repository URL, revision, and SSH credentials.",
            context={
                "operation": "fetch_git",
                "argv": " ".join(command),
                "returncode": str(completed.returncode),
                "stderr": completed.stderr.strip(),
            },
        )
    return completed.stdout.strip()
