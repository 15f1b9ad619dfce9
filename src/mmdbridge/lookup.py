"""IP address lookups against an opened database."""

import ipaddress
from dataclasses import dataclass
from typing import Optional

from . import config
from .bridge import convert
from .errors import RecordLookupError, invalid_input
from .handle import DatabaseHandle
from .values import GenericValue


@dataclass(frozen=True)
class Found:
    """The address is present; ``value`` is its record."""

    value: GenericValue
    prefix_len: Optional[int] = None

    def unwrap(self):
        return self.value


@dataclass(frozen=True)
class NotFound:
    """The address is valid but has no record. Not an error."""

    prefix_len: Optional[int] = None

    def unwrap(self):
        return None


@dataclass(frozen=True)
class Failed:
    """The decoder could not complete the lookup."""

    error: RecordLookupError

    def unwrap(self):
        raise self.error


def parse_ip(ip):
    """Parse an IPv4 or IPv6 address string.

    Only bare addresses are accepted: no hostnames, ports, CIDR suffixes or
    IPv6 zone IDs.

    Raises:
        InvalidInputError: If ``ip`` is not a string holding a valid address
    """
    if not isinstance(ip, str):
        raise invalid_input(ip)
    try:
        address = ipaddress.ip_address(ip)
    except ValueError as exc:
        raise invalid_input(ip) from exc
    if getattr(address, "scope_id", None) is not None:
        raise invalid_input(ip)
    return address


class LookupService:
    """Validates input and runs lookups against a shared handle."""

    def __init__(self, handle):
        self.handle = handle

    def get(self, ip):
        """Look up ``ip`` and return a ``Found``, ``NotFound`` or ``Failed`` outcome.

        Raises:
            InvalidInputError: If ``ip`` does not parse
        """
        address = parse_ip(ip)
        try:
            value, prefix_len = self.handle.lookup(address)
        except RecordLookupError as exc:
            return Failed(exc)
        if value is None:
            return NotFound(prefix_len)
        return Found(value, prefix_len)


class Reader:
    """MaxMind DB reader returning records as native Python objects."""

    def __init__(self, path, mode=config.DEFAULT_MODE):
        """Open the database.

        Args:
            path: Location of the ``.mmdb`` file
            mode: One of the ``maxminddb.MODE_*`` constants

        Raises:
            DatabaseIOError: If the database cannot be opened
        """
        self._handle = DatabaseHandle.open(path, mode)
        self._service = LookupService(self._handle)

    @property
    def closed(self):
        return self._handle.closed

    def lookup(self, ip):
        """Return the raw ``LookupOutcome`` for ``ip``."""
        return self._service.get(ip)

    def get(self, ip):
        """Look up ``ip``.

        Returns:
            The record as nested ``dict``/``list``/scalars, or ``None`` if the
            address is not in the database

        Raises:
            InvalidInputError: If ``ip`` is not a valid IP address
            RecordLookupError: If the decoder fails
        """
        value = self.lookup(ip).unwrap()
        if value is None:
            return None
        return convert(value)

    def get_with_prefix_len(self, ip):
        """Like ``get`` but also return the prefix length of the matching network."""
        outcome = self.lookup(ip)
        value = outcome.unwrap()
        if value is None:
            return None, outcome.prefix_len
        return convert(value), outcome.prefix_len

    def metadata(self):
        return self._handle.metadata()

    def close(self):
        self._handle.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()


def open_database(path, mode=config.DEFAULT_MODE):
    """Open the database at ``path`` and return a ``Reader``."""
    return Reader(path, mode)


def lookup_many(reader, ips):
    """Look up several addresses; returns a dict of ip -> record or ``None``."""
    return {ip: reader.get(ip) for ip in ips}
