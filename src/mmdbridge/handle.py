"""Handle owning a decoder bound to one opened database file."""

import logging
from pathlib import Path

import maxminddb

from . import config
from .errors import RecordLookupError, lookup_failure, open_failure
from .values import from_record

logger = logging.getLogger(__name__)

METADATA_FIELDS = (
    "binary_format_major_version",
    "binary_format_minor_version",
    "build_epoch",
    "database_type",
    "description",
    "ip_version",
    "languages",
    "node_count",
    "record_size",
)

# Failures the decoder reports for unreadable or structurally broken data.
DECODER_ERRORS = (maxminddb.InvalidDatabaseError, OSError, ValueError)


class DatabaseHandle:
    """Read-only binding to an opened MaxMind DB file.

    The handle is created once by ``open`` and never changes afterwards, so
    one instance can serve lookups from many threads at the same time.
    """

    def __init__(self, reader, path):
        self._reader = reader
        self._path = Path(path)
        self._closed = False

    @classmethod
    def open(cls, path, mode=config.DEFAULT_MODE):
        """Open ``path`` and construct the decoder over it.

        Args:
            path: Location of the ``.mmdb`` file
            mode: One of the ``maxminddb.MODE_*`` constants

        Returns:
            DatabaseHandle: Handle ready for lookups

        Raises:
            DatabaseIOError: If the file cannot be opened, its metadata cannot
                be read, or its structure is invalid
        """
        try:
            reader = maxminddb.open_database(str(path), mode)
        except DECODER_ERRORS as exc:
            logger.debug("Failed to open %s: %s", path, exc)
            raise open_failure(path, exc) from exc
        logger.debug("Opened %s (mode=%s)", path, mode)
        return cls(reader, path)

    @property
    def path(self):
        return self._path

    @property
    def closed(self):
        return self._closed

    def lookup(self, address):
        """Look up a parsed address.

        Args:
            address: ``ipaddress.IPv4Address`` or ``ipaddress.IPv6Address``

        Returns:
            tuple: ``(GenericValue or None, prefix_len)``; ``None`` means the
            address is not in the database

        Raises:
            RecordLookupError: If the handle is closed or the decoder fails
        """
        if self._closed:
            raise RecordLookupError(f"Lookup error for {address}: database is closed")
        try:
            record, prefix_len = self._reader.get_with_prefix_len(address)
            if record is None:
                return None, prefix_len
            return from_record(record), prefix_len
        except (*DECODER_ERRORS, TypeError) as exc:
            logger.debug("Lookup of %s in %s failed: %s", address, self._path, exc)
            raise lookup_failure(address, exc) from exc

    def metadata(self):
        """Return the database metadata as a plain dict."""
        if self._closed:
            raise RecordLookupError("Cannot read metadata: database is closed")
        meta = self._reader.metadata()
        return {name: getattr(meta, name) for name in METADATA_FIELDS}

    def close(self):
        """Release the underlying file resource. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._reader.close()
        logger.debug("Closed %s", self._path)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self):
        state = "closed" if self._closed else "open"
        return f"<DatabaseHandle {self._path} ({state})>"
