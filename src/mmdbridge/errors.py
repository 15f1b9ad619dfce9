"""Error taxonomy exposed to callers and helpers that build it from causes."""

import enum


class ErrorKind(enum.Enum):
    """Failure categories a caller can distinguish."""

    INVALID_INPUT = "invalid_input"
    IO_ERROR = "io_error"
    LOOKUP_ERROR = "lookup_error"


class MMDBridgeError(Exception):
    """Base class for every error raised by mmdbridge."""

    kind = None


class InvalidInputError(MMDBridgeError, ValueError):
    """The supplied IP address string could not be parsed."""

    kind = ErrorKind.INVALID_INPUT


class DatabaseIOError(MMDBridgeError, OSError):
    """The database file could not be opened or failed validation."""

    kind = ErrorKind.IO_ERROR


class RecordLookupError(MMDBridgeError, ValueError):
    """The decoder failed during a lookup for a reason other than absence.

    The handle that raised it remains usable.
    """

    kind = ErrorKind.LOOKUP_ERROR


def invalid_input(ip):
    """Build the error for an IP address that does not parse."""
    return InvalidInputError(f"Invalid IP address: {ip!r}")


def open_failure(path, exc):
    """Build the error for a database that cannot be opened."""
    return DatabaseIOError(f"Failed to open database {path}: {_describe(exc)}")


def lookup_failure(ip, exc):
    """Build the error for a lookup the decoder could not complete."""
    return RecordLookupError(f"Lookup error for {ip}: {_describe(exc)}")


def _describe(exc):
    message = str(exc)
    if not message:
        return type(exc).__name__
    return message
