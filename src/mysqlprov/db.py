"""Single-statement SQL execution through mysql-connector."""

from __future__ import annotations

import mysql.connector

from mysqlprov.errors import DatabaseError
from mysqlprov.models import ConnectionInfo


def quote_identifier(name: str) -> str:
    return "`" + name.replace("`", "``") + "`"


def execute_query(
    connection: ConnectionInfo,
    sql: str,
    *,
    database: str | None = None,
) -> None:
    context = {
        "operation": "execute_query",
        "host": connection.host,
        "user": connection.user,
        "database": database or "",
    }
    try:
        conn = mysql.connector.connect(
            host=connection.host,
            user=connection.user,
            password=connection.password,
            database=database,
        )
    except mysql.connector.Error as exc:
        raise DatabaseError(
            "Unable to connect to MySQL.",
            hint="Check that the server is running and the root password is correct.",
            context={**context, "error": str(exc)},
        ) from exc
    try:
        cursor = conn.cursor()
        try:
            cursor.execute(sql)
            conn.commit()
        finally:
            cursor.close()
    except mysql.connector.Error as exc:
        raise DatabaseError(
            "MySQL query failed.",
            context={**context, "sql": sql, "error": str(exc)},
        ) from exc
    finally:
        conn.close()
