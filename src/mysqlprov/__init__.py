"""Public package entrypoint for the MySQL provisioning steps."""

from .config import ImportConfig
from .decode import CompressionKind, decode, select_decompressor
from .errors import (
    CleanupWarning,
    DatabaseError,
    DecodeError,
    DumpImportError,
    ErrorCode,
    FetchError,
    ProvisionError,
    ValidationError,
)
from .gate import ImportGate
from .loader import ArtifactLoader, InProcessLoader, MysqlClientLoader
from .master import reset_master
from .models import (
    ConnectionInfo,
    CredentialHandle,
    DatabaseTarget,
    FetchSpec,
    ImportOutcome,
    ImportResult,
    Sentinel,
    StagingPaths,
)
from .observability import StructuredLogger
from .pipeline import DumpImportPipeline
from .sentinel import SentinelStore

__all__ = [
    "ArtifactLoader",
    "CleanupWarning",
    "CompressionKind",
    "ConnectionInfo",
    "CredentialHandle",
    "DatabaseError",
    "DatabaseTarget",
    "DecodeError",
    "DumpImportError",
    "DumpImportPipeline",
    "ErrorCode",
    "FetchError",
    "FetchSpec",
    "ImportConfig",
    "ImportGate",
    "ImportOutcome",
    "ImportResult",
    "InProcessLoader",
    "MysqlClientLoader",
    "ProvisionError",
    "Sentinel",
    "SentinelStore",
    "StagingPaths",
    "StructuredLogger",
    "ValidationError",
    "decode",
    "reset_master",
    "select_decompressor",
]
