"""Scratch directory removal."""

from __future__ import annotations

import shutil
import warnings
from pathlib import Path

from mysqlprov.errors import CleanupWarning
from mysqlprov.observability import StructuredLogger


def remove_scratch(destination: str | Path, *, logger: StructuredLogger) -> bool:
    """Recursively delete ``destination``. Failures warn instead of raising."""
    path = Path(destination)
    if not path.exists():
        return True
    try:
        shutil.rmtree(path)
    except OSError as exc:
        message = f"Failed to remove scratch directory {path}: {exc}"
        logger.log(
            operation="remove_scratch",
            step="cleanup",
            level="warning",
            message=message,
            extra={"path": str(path)},
        )
        warnings.warn(message, CleanupWarning, stacklevel=2)
        return False
    logger.log(
        operation="remove_scratch",
        step="cleanup",
        message=f"Removed scratch directory {path}.",
    )
    return True
