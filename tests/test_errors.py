"""Tests for the error taxonomy."""

import maxminddb
import pytest

from mmdbridge.errors import (
    DatabaseIOError,
    ErrorKind,
    InvalidInputError,
    MMDBridgeError,
    RecordLookupError,
    invalid_input,
    lookup_failure,
    open_failure,
)


class TestKinds:
    @pytest.mark.parametrize(
        "exc_class, kind",
        [
            (InvalidInputError, ErrorKind.INVALID_INPUT),
            (DatabaseIOError, ErrorKind.IO_ERROR),
            (RecordLookupError, ErrorKind.LOOKUP_ERROR),
        ],
    )
    def test_kind(self, exc_class, kind):
        assert exc_class.kind is kind
        assert issubclass(exc_class, MMDBridgeError)

    def test_builtin_bases(self):
        assert issubclass(InvalidInputError, ValueError)
        assert issubclass(DatabaseIOError, OSError)
        assert issubclass(RecordLookupError, ValueError)


class TestBuilders:
    def test_invalid_input_message(self):
        err = invalid_input("not-an-ip")
        assert isinstance(err, InvalidInputError)
        assert "not-an-ip" in str(err)

    def test_open_failure_message(self):
        cause = FileNotFoundError(2, "No such file or directory")
        err = open_failure("/tmp/missing.mmdb", cause)
        assert isinstance(err, DatabaseIOError)
        assert "/tmp/missing.mmdb" in str(err)
        assert "No such file or directory" in str(err)

    def test_lookup_failure_message(self):
        cause = maxminddb.InvalidDatabaseError("corrupt record")
        err = lookup_failure("1.2.3.4", cause)
        assert isinstance(err, RecordLookupError)
        assert "1.2.3.4" in str(err)
        assert "corrupt record" in str(err)

    def test_empty_cause_uses_type_name(self):
        err = lookup_failure("1.2.3.4", ValueError())
        assert "ValueError" in str(err)
