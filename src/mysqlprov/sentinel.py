"""Touch-file sentinels recording completed imports."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from mysqlprov.models import Sentinel

SENTINEL_DIR_MODE = 0o755


class SentinelStore:
    """Sentinels live at ``<directory>/<namespace>-import-<basename>.touch``.

    Keys are artifact basenames, so two dumps with the same file name in
    different directories share one sentinel.
    """

    def __init__(self, directory: str | Path, namespace: str) -> None:
        self.directory = Path(directory)
        self.namespace = namespace

    @staticmethod
    def key_for(artifact_path: str | Path) -> str:
        return Path(artifact_path).name

    def path_for(self, key: str) -> Path:
        return self.directory / f"{self.namespace}-import-{key}.touch"

    def lookup(self, key: str) -> Sentinel | None:
        try:
            return _sentinel_from(key, self.path_for(key))
        except FileNotFoundError:
            return None

    def mark(self, key: str) -> Sentinel:
        self.directory.mkdir(mode=SENTINEL_DIR_MODE, parents=True, exist_ok=True)
        path = self.path_for(key)
        path.touch()
        return _sentinel_from(key, path)


def _sentinel_from(key: str, path: Path) -> Sentinel:
    modified = path.stat().st_mtime
    return Sentinel(key=key, path=path, created_at=datetime.fromtimestamp(modified, tz=timezone.utc))
