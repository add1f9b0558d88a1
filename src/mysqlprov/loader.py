"""Loaders that feed decoded SQL into a database."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from mysqlprov.db import execute_query, quote_identifier
from mysqlprov.decode import strip_compression_suffix
from mysqlprov.errors import DatabaseError, DumpImportError
from mysqlprov.models import ConnectionInfo, DatabaseTarget


class ArtifactLoader(Protocol):
    name: str

    def load(self, target: DatabaseTarget, sql: bytes) -> None:
        """Load ``sql`` into ``target`` or raise ``DumpImportError``."""


def database_target_for(artifact_path: str | Path, connection: ConnectionInfo) -> DatabaseTarget:
    """Only the compression suffix is dropped: ``dump.sql.gz`` loads into ``dump.sql``."""
    return DatabaseTarget(name=strip_compression_suffix(artifact_path), connection=connection)


@dataclass(slots=True)
class MysqlClientLoader:
    """Pipe SQL through the ``mysql`` command-line client.

    Dumps may contain client directives (``DELIMITER``, ``SOURCE``) that only
    the client understands, so the payload is not sent through the connector.
    """

    name: str = "mysql_client"
    executable: str = "mysql"
    create_database: bool = True

    def load(self, target: DatabaseTarget, sql: bytes) -> None:
        if self.create_database:
            try:
                execute_query(
                    target.connection,
                    f"CREATE DATABASE IF NOT EXISTS {quote_identifier(target.name)}",
                )
            except DatabaseError as exc:
                raise DumpImportError(
                    "Unable to create target database.",
                    context={**exc.context, "loader": self.name, "database": target.name},
                ) from exc

        command = [
            self.executable,
            f"--host={target.connection.host}",
            f"--user={target.connection.user}",
            target.name,
        ]
        env = dict(os.environ)
        env["MYSQL_PWD"] = target.connection.password
        try:
            completed = subprocess.run(
                command,
                input=sql,
                env=env,
                check=False,
                capture_output=True,
            )
        except FileNotFoundError as exc:
            raise DumpImportError(
                f"MySQL client `{self.executable}` not found.",
                hint="Install the MySQL client package on this host.",
                context={"loader": self.name, "database": target.name},
            ) from exc
        if completed.returncode != 0:
            raise DumpImportError(
                "MySQL client failed to load the dump.",
                hint="Inspect the dump contents and the server error log.",
                context={
                    "loader": self.name,
                    "database": target.name,
                    "argv": " ".join(command),
                    "returncode": str(completed.returncode),
                    "stderr": completed.stderr.decode("utf-8", "replace")[:2000].strip(),
                },
            )


@dataclass(slots=True)
class InProcessLoader:
    """Loader that records payloads in memory instead of touching a server."""

    name: str = "inprocess"
    loads: list[tuple[DatabaseTarget, bytes]] = field(default_factory=list)

    def load(self, target: DatabaseTarget, sql: bytes) -> None:
        self.loads.append((target, sql))
