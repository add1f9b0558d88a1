"""Dump import pipeline: stage credential, fetch, import once, clean up."""

from __future__ import annotations

from mysqlprov.cleanup import remove_scratch
from mysqlprov.config import ImportConfig
from mysqlprov.fetch import fetch_git
from mysqlprov.gate import ImportGate
from mysqlprov.loader import ArtifactLoader
from mysqlprov.models import ImportResult
from mysqlprov.observability import StructuredLogger
from mysqlprov.sentinel import SentinelStore
from mysqlprov.staging import staged_credential


class DumpImportPipeline:
    def __init__(
        self,
        config: ImportConfig,
        loader: ArtifactLoader,
        *,
        logger: StructuredLogger | None = None,
        dry_run: bool = False,
    ) -> None:
        self.config = config
        self.loader = loader
        self.logger = logger if logger is not None else StructuredLogger()
        self.store = SentinelStore(config.sentinel_dir(), config.namespace)
        self.gate = ImportGate(
            self.store,
            loader,
            config.connection(),
            logger=self.logger,
            record_sentinel=not dry_run,
        )

    def run(self) -> ImportResult:
        config = self.config
        try:
            with staged_credential(
                config.private_key,
                paths=config.paths,
                logger=self.logger,
            ) as credential:
                fetch_git(config.fetch_spec(), credential, logger=self.logger)

            artifact = config.artifact_path()
            outcome = self.gate.run_once(artifact)
        finally:
            remove_scratch(config.paths.destination, logger=self.logger)

        return ImportResult(
            outcome=outcome,
            artifact=artifact,
            sentinel=self.store.lookup(self.store.key_for(artifact)),
        )
