"""Dump decompression selected by filename suffix."""

from __future__ import annotations

import subprocess
from enum import StrEnum
from pathlib import Path

from mysqlprov.errors import DecodeError


class CompressionKind(StrEnum):
    NONE = "none"
    GZIP = "gzip"
    BZIP2 = "bzip2"
    XZ = "xz"


SUFFIXES: dict[str, CompressionKind] = {
    ".gz": CompressionKind.GZIP,
    ".bz2": CompressionKind.BZIP2,
    ".xz": CompressionKind.XZ,
}

_COMMANDS: dict[CompressionKind, tuple[str, ...]] = {
    CompressionKind.GZIP: ("gunzip", "--stdout"),
    CompressionKind.BZIP2: ("bunzip2", "--stdout"),
    CompressionKind.XZ: ("xz", "--decompress", "--stdout"),
}


def select_decompressor(filename: str | Path) -> CompressionKind:
    name = Path(filename).name
    for suffix, kind in SUFFIXES.items():
        if name.endswith(suffix):
            return kind
    return CompressionKind.NONE


def strip_compression_suffix(filename: str | Path) -> str:
    """``dump.sql.gz`` -> ``dump.sql``; names without a compression suffix are kept."""
    name = Path(filename).name
    for suffix in SUFFIXES:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[: -len(suffix)]
    return name


def decompress_command(path: Path, kind: CompressionKind) -> list[str]:
    if kind is CompressionKind.NONE:
        raise ValueError("Uncompressed dumps are read directly.")
    return [*_COMMANDS[kind], str(path)]


def decode(path: str | Path, kind: CompressionKind) -> bytes:
    """Return the SQL payload of a dump, decompressing it if needed."""
    dump_path = Path(path)
    if kind is CompressionKind.NONE:
        try:
            return dump_path.read_bytes()
        except OSError as exc:
            raise DecodeError(
                "Unable to read dump file.",
                context={"operation": "decode", "path": str(dump_path), "error": str(exc)},
            ) from exc

    command = decompress_command(dump_path, kind)
    try:
        completed = subprocess.run(command, check=False, capture_output=True)
    except FileNotFoundError as exc:
        raise DecodeError(
            f"Decompression tool `{command[0]}` not found.",
            hint=f"Install the {kind} tools on this host.",
            context={"operation": "decode", "path": str(dump_path)},
        ) from exc
    if completed.returncode != 0:
        raise DecodeError(
            "Dump decompression failed.",
            hint="The dump may be truncated or not match its suffix.",
            context={
                "operation": "decode",
                "path": str(dump_path),
                "kind": str(kind),
                "argv": " ".join(command),
                "returncode": str(completed.returncode),
                "stderr": completed.stderr.decode("utf-8", "replace").strip(),
            },
        )
    return completed.stdout
