"""Transient SSH credential staging for repository fetches.

The private key and the ``GIT_SSH`` wrapper only exist on disk for the span of
a fetch. ``staged_credential`` ties their removal to the ``with`` block so a
failed fetch still releases them.
"""

from __future__ import annotations

import os
import shlex
import warnings
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from mysqlprov.errors import CleanupWarning
from mysqlprov.models import CredentialHandle, StagingPaths
from mysqlprov.observability import StructuredLogger

OWNER_ONLY_MODE = 0o700
RELEASE_ATTEMPTS = 3


def wrapper_script(key_file: Path) -> str:
    return (
        "#!/bin/sh\n"
        f'exec ssh -o StrictHostKeyChecking=no -i {shlex.quote(str(key_file))} "$@"\n'
    )


def stage_credential(
    private_key: str | None,
    *,
    paths: StagingPaths,
    logger: StructuredLogger,
) -> CredentialHandle | None:
    if not private_key:
        logger.log(
            operation="stage_credential",
            step="stage",
            message="No private key configured; fetching without an SSH wrapper.",
        )
        return None

    key_material = private_key if private_key.endswith("\n") else private_key + "\n"
    _write_owner_only(paths.key_file, key_material)
    _write_owner_only(paths.ssh_wrapper, wrapper_script(paths.key_file))
    logger.log(
        operation="stage_credential",
        step="stage",
        message="Staged private key and SSH wrapper.",
        extra={"key_file": str(paths.key_file), "ssh_wrapper": str(paths.ssh_wrapper)},
    )
    return CredentialHandle(key_file=paths.key_file, ssh_wrapper=paths.ssh_wrapper)


def release_credential(handle: CredentialHandle | None, *, logger: StructuredLogger) -> bool:
    """Delete staged credential files. Returns False if any file survived."""
    if handle is None:
        return True
    released = True
    for path in (handle.key_file, handle.ssh_wrapper):
        error = _unlink_with_retry(path)
        if error is None:
            continue
        released = False
        message = f"Failed to remove staged credential file {path}: {error}"
        logger.log(
            operation="release_credential",
            step="release",
            level="error",
            message=message,
            extra={"path": str(path), "attempts": RELEASE_ATTEMPTS},
        )
        warnings.warn(message, CleanupWarning, stacklevel=2)
    if released:
        logger.log(
            operation="release_credential",
            step="release",
            message="Removed staged private key and SSH wrapper.",
        )
    return released


@contextmanager
def staged_credential(
    private_key: str | None,
    *,
    paths: StagingPaths,
    logger: StructuredLogger,
) -> Iterator[CredentialHandle | None]:
    handle = None
    try:
        handle = stage_credential(private_key, paths=paths, logger=logger)
        yield handle
    finally:
        if handle is not None:
            release_credential(handle, logger=logger)
        elif private_key:
            # Staging itself failed part way; remove whatever was written.
            release_credential(
                CredentialHandle(key_file=paths.key_file, ssh_wrapper=paths.ssh_wrapper),
                logger=logger,
            )


def _write_owner_only(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    # Replace rather than truncate so a planted symlink is never followed.
    path.unlink(missing_ok=True)
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL | os.O_NOFOLLOW, OWNER_ONLY_MODE)
    with os.fdopen(fd, "w", encoding="utf-8") as handle:
        # os.open applies the umask; the staged files must be exactly 0700.
        os.fchmod(handle.fileno(), OWNER_ONLY_MODE)
        handle.write(content)


def _unlink_with_retry(path: Path) -> OSError | None:
    error: OSError | None = None
    for _ in range(RELEASE_ATTEMPTS):
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            error = exc
            continue
        return None
    return error
