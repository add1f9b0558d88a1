from mysqlprov.errors import (
    DatabaseError,
    DecodeError,
    DumpImportError,
    ErrorCode,
    FetchError,
    ValidationError,
)
from mysqlprov.models import ConnectionInfo, ImportOutcome


def test_error_codes_are_stable_and_machine_readable() -> None:
    errors = [
        ValidationError("bad input"),
        FetchError("clone failed"),
        DecodeError("corrupt gzip"),
        DumpImportError("load failed"),
        DatabaseError("query failed"),
    ]
    assert [error.code for error in errors] == [
        ErrorCode.VALIDATION.value,
        ErrorCode.FETCH.value,
        ErrorCode.DECODE.value,
        ErrorCode.IMPORT.value,
        ErrorCode.DATABASE.value,
    ]


def test_decode_error_is_an_import_error() -> None:
    assert isinstance(DecodeError("corrupt"), DumpImportError)


def test_error_str_includes_hint_and_non_empty_context() -> None:
    error = FetchError(
        "Git command failed.",
        hint="Check the revision.",
        context={"argv": "git checkout nope", "stderr": ""},
    )

    rendered = str(error)

    assert "Hint: Check the revision." in rendered
    assert "argv: git checkout nope" in rendered
    assert "stderr" not in rendered
    assert error.to_dict()["code"] == "E_FETCH"


def test_connection_info_repr_hides_password() -> None:
    connection = ConnectionInfo(password="rootpass")

    assert "rootpass" not in repr(connection)


def test_import_outcome_values() -> None:
    assert str(ImportOutcome.SKIPPED) == "skipped"
    assert str(ImportOutcome.IMPORTED) == "imported"
