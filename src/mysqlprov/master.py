"""Replication master post-install steps."""

from __future__ import annotations

from mysqlprov.db import execute_query
from mysqlprov.models import ConnectionInfo
from mysqlprov.observability import StructuredLogger

RESET_MASTER_SQL = "RESET MASTER"


def reset_master(connection: ConnectionInfo, *, logger: StructuredLogger) -> None:
    """Drop binary logs that recorded the system tables created at install time."""
    logger.log(
        operation="reset_master",
        step="master",
        message=f"Resetting binary logs on {connection.host}.",
    )
    execute_query(connection, RESET_MASTER_SQL, database="mysql")
    logger.log(
        operation="reset_master",
        step="master",
        message="Binary logs reset.",
    )
