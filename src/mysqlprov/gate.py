"""Run-once gate around a dump import, keyed by a touch-file sentinel."""

from __future__ import annotations

from pathlib import Path

from mysqlprov.decode import decode, select_decompressor
from mysqlprov.errors import DatabaseError, DumpImportError
from mysqlprov.loader import ArtifactLoader, database_target_for
from mysqlprov.models import ConnectionInfo, ImportOutcome
from mysqlprov.observability import StructuredLogger
from mysqlprov.sentinel import SentinelStore


class ImportGate:
    def __init__(
        self,
        store: SentinelStore,
        loader: ArtifactLoader,
        connection: ConnectionInfo,
        *,
        logger: StructuredLogger,
        record_sentinel: bool = True,
    ) -> None:
        self.store = store
        self.loader = loader
        self.connection = connection
        self.logger = logger
        self.record_sentinel = record_sentinel

    def run_once(self, artifact_path: str | Path) -> ImportOutcome:
        """Import the dump unless its sentinel says it was already imported.

        The sentinel is only written after the loader returns, so a failed
        decode or load leaves the next run free to retry from scratch.
        """
        artifact = Path(artifact_path)
        key = self.store.key_for(artifact)
        existing = self.store.lookup(key)
        if existing is not None:
            self.logger.log(
                operation="run_once",
                step="gate",
                message=f"The dump file was already imported at {existing.created_at.isoformat()}",
                extra={"key": key, "sentinel": str(existing.path), "imported_at": existing.created_at},
            )
            return ImportOutcome.SKIPPED

        kind = select_decompressor(artifact)
        target = database_target_for(artifact, self.connection)
        self.logger.log(
            operation="run_once",
            step="gate",
            message=f"Importing {artifact.name} into database `{target.name}`.",
            extra={"key": key, "compression": str(kind), "loader": self.loader.name},
        )
        sql = decode(artifact, kind)
        try:
            self.loader.load(target, sql)
        except DumpImportError:
            raise
        except (OSError, DatabaseError) as exc:
            raise DumpImportError(
                "Dump load failed.",
                context={"loader": self.loader.name, "database": target.name, "error": str(exc)},
            ) from exc

        if not self.record_sentinel:
            self.logger.log(
                operation="run_once",
                step="gate",
                message=f"Dry run loaded {artifact.name}; sentinel not recorded.",
                extra={"key": key, "loader": self.loader.name},
            )
            return ImportOutcome.IMPORTED

        try:
            sentinel = self.store.mark(key)
        except OSError as exc:
            raise DumpImportError(
                "Dump loaded but the import sentinel could not be recorded.",
                hint="Check permissions on the sentinel directory; the next run will load again.",
                context={"key": key, "sentinel": str(self.store.path_for(key)), "error": str(exc)},
            ) from exc
        self.logger.log(
            operation="run_once",
            step="gate",
            message=f"Imported {artifact.name}; recorded sentinel {sentinel.path}.",
            extra={"key": key, "sentinel": str(sentinel.path)},
        )
        return ImportOutcome.IMPORTED
