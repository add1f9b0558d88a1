import json
from pathlib import Path

import pytest

from conftest import GitRepo
from mysqlprov.cli import main
from mysqlprov.models import ConnectionInfo, StagingPaths
from mysqlprov.observability import StructuredLogger, stderr_logger


def _write_config(path: Path, repo: GitRepo, paths: StagingPaths) -> Path:
    payload = {
        "repository": str(repo.path),
        "revision": "main",
        "dump_file": "backup.sql",
        "database_root_password": "rootpass",
        "paths": {
            "key_file": str(paths.key_file),
            "ssh_wrapper": str(paths.ssh_wrapper),
            "destination": str(paths.destination),
            "sentinel_root": str(paths.sentinel_root),
        },
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


def test_import_dry_run_does_not_record_sentinel(
    tmp_path: Path,
    git_repo: GitRepo,
    staging_paths: StagingPaths,
    capsys: pytest.CaptureFixture[str],
) -> None:
    git_repo.add_file("backup.sql", b"SELECT 1;\n")
    config = _write_config(tmp_path / "import.json", git_repo, staging_paths)
    log_file = tmp_path / "run.jsonl"

    assert main(["import", "--config", str(config), "--dry-run", "--log-file", str(log_file)]) == 0
    assert main(["import", "--config", str(config), "--dry-run"]) == 0

    out = capsys.readouterr().out.splitlines()
    assert out == ["backup.sql: imported", "backup.sql: imported"]
    assert not (staging_paths.sentinel_root / "mysqlprov" / "mysqlprov-import-backup.sql.touch").exists()
    records = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert any(record["step"] == "gate" for record in records)


def test_import_with_missing_config_exits_nonzero(
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
) -> None:
    assert main(["import", "--config", str(tmp_path / "missing.json")]) == 1
    assert "[error] cli: Configuration file does not exist." in capsys.readouterr().err


def test_error_record_is_written_to_log_file(tmp_path: Path) -> None:
    log_file = tmp_path / "run.jsonl"

    assert main(["import", "--config", str(tmp_path / "missing.json"), "--log-file", str(log_file)]) == 1

    (record,) = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert record["level"] == "error"
    assert record["step"] == "cli"
    assert record["extra"]["code"] == "E_VALIDATION"
    assert record["extra"]["context"]["path"].endswith("missing.json")


def test_reset_master_requires_password(
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.delenv("MYSQLPROV_ROOT_PASSWORD", raising=False)

    assert main(["reset-master"]) == 1
    assert "MYSQLPROV_ROOT_PASSWORD" in capsys.readouterr().err


def test_reset_master_uses_connection_from_arguments(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[ConnectionInfo, str, str | None]] = []

    def fake_query(connection: ConnectionInfo, sql: str, *, database: str | None = None) -> None:
        calls.append((connection, sql, database))

    monkeypatch.setenv("MYSQLPROV_ROOT_PASSWORD", "rootpass")
    monkeypatch.setattr("mysqlprov.master.execute_query", fake_query)

    assert main(["reset-master", "--host", "db1", "--user", "admin"]) == 0
    assert calls == [
        (ConnectionInfo(host="db1", user="admin", password="rootpass"), "RESET MASTER", "mysql"),
    ]


def test_cli_logger_echoes_and_keeps_records() -> None:
    logger = stderr_logger()
    assert isinstance(logger, StructuredLogger)
    assert logger.stream is not None
