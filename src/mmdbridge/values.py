"""Tagged-variant model for values produced by the database decoder.

Every record the decoder returns is described by exactly one of the variants
below. Containers hold other variants, never raw Python objects, so a tree of
these values is closed: the bridge only has to know seven construction rules.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


@dataclass(frozen=True)
class Null:
    """Absence of a value inside a record."""


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Int:
    """Signed 64-bit integer."""

    value: int

    def __post_init__(self):
        if not INT64_MIN <= self.value <= INT64_MAX:
            raise ValueError(f"{self.value} does not fit in a signed 64-bit integer")


@dataclass(frozen=True)
class Float:
    value: float


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True, repr=False)
class Array:
    """Ordered sequence of values."""

    items: Tuple["GenericValue", ...] = ()

    def __repr__(self):
        return f"Array(<{len(self.items)} items>)"


@dataclass(frozen=True, repr=False)
class Object:
    """Ordered mapping from text keys to values.

    Entries are kept as ``(key, value)`` pairs in insertion order.
    """

    entries: Tuple[Tuple[str, "GenericValue"], ...] = ()

    def __post_init__(self):
        keys = [key for key, _ in self.entries]
        if len(set(keys)) != len(keys):
            raise ValueError("Object keys must be unique")

    def keys(self):
        return [key for key, _ in self.entries]

    def __repr__(self):
        return f"Object(<{len(self.entries)} entries>)"


GenericValue = Union[Null, Bool, Int, Float, String, Array, Object]

NULL = Null()


def number(value):
    """Return ``Int`` if ``value`` is an exact signed 64-bit integer, else ``Float``."""
    if isinstance(value, int) and INT64_MIN <= value <= INT64_MAX:
        return Int(value)
    return Float(float(value))


def _scalar(raw):
    if raw is None:
        return NULL
    # bool is a subclass of int and must be matched first.
    if isinstance(raw, bool):
        return Bool(raw)
    if isinstance(raw, (int, float)):
        return number(raw)
    if isinstance(raw, str):
        return String(raw)
    raise TypeError(f"Unsupported decoder value type: {type(raw).__name__}")


def from_record(raw):
    """Build a ``GenericValue`` tree from raw decoder output.

    The decoder hands back plain ``dict``/``list``/scalar objects. Byte
    strings become arrays of byte values. The walk uses an explicit stack, so
    arbitrarily deep records do not hit the interpreter recursion limit.
    """
    # Containers are assembled bottom-up: a frame is visited once to push its
    # children and a second time to freeze the collected results.
    results = []
    stack = [(raw, False)]
    while stack:
        node, expanded = stack.pop()
        if isinstance(node, (bytes, bytearray)):
            results.append(Array(tuple(Int(byte) for byte in node)))
        elif isinstance(node, dict):
            if not expanded:
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(list(node.values())))
                continue
            children = _take(results, len(node))
            for key in node:
                if not isinstance(key, str):
                    raise TypeError(
                        f"Unsupported decoder map key type: {type(key).__name__}"
                    )
            results.append(Object(tuple(zip(node.keys(), children))))
        elif isinstance(node, (list, tuple)):
            if not expanded:
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(node))
                continue
            results.append(Array(tuple(_take(results, len(node)))))
        else:
            results.append(_scalar(node))
    return results[0]


def _take(results, count):
    if not count:
        return []
    children = results[-count:]
    del results[-count:]
    return children
