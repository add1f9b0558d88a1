"""Command-line entrypoint.

Usage:
    mysqlprov import --config import.json [--dry-run] [--log-file run.jsonl]
    mysqlprov reset-master [--host localhost] [--user root]
"""

from __future__ import annotations

import argparse
import os

from mysqlprov.config import ROOT_PASSWORD_ENV, ImportConfig
from mysqlprov.errors import ProvisionError, ValidationError
from mysqlprov.loader import ArtifactLoader, InProcessLoader, MysqlClientLoader
from mysqlprov.master import reset_master
from mysqlprov.models import ConnectionInfo
from mysqlprov.observability import StructuredLogger, stderr_logger
from mysqlprov.pipeline import DumpImportPipeline


def cmd_import(args: argparse.Namespace, logger: StructuredLogger) -> None:
    config = ImportConfig.from_json_file(args.config)
    loader: ArtifactLoader = InProcessLoader() if args.dry_run else MysqlClientLoader()
    result = DumpImportPipeline(config, loader, logger=logger, dry_run=args.dry_run).run()
    print(f"{result.artifact.name}: {result.outcome}")


def cmd_reset_master(args: argparse.Namespace, logger: StructuredLogger) -> None:
    password = os.environ.get(ROOT_PASSWORD_ENV)
    if not password:
        raise ValidationError(
            "Root password is not set.",
            hint=f"Export {ROOT_PASSWORD_ENV} before running reset-master.",
        )
    reset_master(ConnectionInfo(host=args.host, user=args.user, password=password), logger=logger)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mysqlprov", description="MySQL host provisioning steps")
    sub = parser.add_subparsers(dest="command", required=True)

    import_p = sub.add_parser("import", help="Fetch a dump from git and import it once")
    import_p.add_argument("--config", required=True, help="Path to the JSON import configuration")
    import_p.add_argument("--dry-run", action="store_true", help="Record the load instead of running mysql")
    import_p.add_argument("--log-file", help="Write structured log records as JSON lines")

    reset_p = sub.add_parser("reset-master", help="Reset binary logs on a new replication master")
    reset_p.add_argument("--host", default="localhost")
    reset_p.add_argument("--user", default="root")
    reset_p.add_argument("--log-file", help="Write structured log records as JSON lines")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logger = stderr_logger()
    try:
        if args.command == "import":
            cmd_import(args, logger)
        elif args.command == "reset-master":
            cmd_reset_master(args, logger)
    except ProvisionError as exc:
        logger.log(
            operation=args.command,
            step="cli",
            level="error",
            message=str(exc),
            extra=exc.to_dict(),
        )
        return 1
    finally:
        if args.log_file:
            logger.to_json_lines(args.log_file)
    return 0
