"""
Query MaxMind DB files by IP address and get native Python objects back.

The binary format is decoded by the ``maxminddb`` library. This package
validates addresses, converts decoded records into ``dict``/``list``/scalar
trees without recursion limits, and reports failures through a small error
taxonomy that keeps "address not found" separate from real errors.
"""

__version__ = "0.1.0"

from .bridge import convert
from .errors import (
    DatabaseIOError,
    ErrorKind,
    InvalidInputError,
    MMDBridgeError,
    RecordLookupError,
)
from .handle import DatabaseHandle
from .lookup import (
    Failed,
    Found,
    LookupService,
    NotFound,
    Reader,
    lookup_many,
    open_database,
)

__all__ = [
    "open_database",
    "Reader",
    "lookup_many",
    "convert",
    "DatabaseHandle",
    "LookupService",
    "Found",
    "NotFound",
    "Failed",
    "ErrorKind",
    "MMDBridgeError",
    "InvalidInputError",
    "DatabaseIOError",
    "RecordLookupError",
]


def main():
    """Entry point for the CLI."""
    from .cli import cli  # pylint: disable=import-outside-toplevel

    cli()
