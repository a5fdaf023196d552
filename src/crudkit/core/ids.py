"""
Public identifier generation and parsing.

Records expose an opaque public identifier instead of their internal key.
The identifier's native type is one of a closed set of :class:`IdKind`
variants; generation and string parsing dispatch on that tag, with an
explicit error for kinds that have no generator.

Generators are strategy objects: anything with ``get_new_id()`` and
``parse(value)`` can be injected into a service, so callers with special
identifier schemes (prefixed codes, ULIDs...) never touch this module.

Kinds::

    STRING               → uuid4 string (122 random bits)
    INT8 .. INT64        → secrets.randbelow in [1, signed max]
    UINT8 .. UINT64      → secrets.randbelow in [1, unsigned max]
                           (UINT64 capped at 2**63 - 1 for BIGINT columns)
    BOOL                 → no generator (ConfigError); parse only

Parsing is lenient: malformed or out-of-range text yields the zero value
of the kind (``""``, ``0``, ``False``).  Callers whose identifiers may
legitimately be zero must check for it.

Tags:
    identifiers, uuid, secrets, crudkit
"""

from __future__ import annotations

import re
import secrets
import string
import uuid
from enum import Enum
from typing import Any, Protocol, runtime_checkable

from crudkit.core.errors import ConfigError
from crudkit.core.logging import get_logger

logger = get_logger(__name__)

_LETTERS = string.ascii_letters

_TRUE_STRINGS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_STRINGS = frozenset({"0", "f", "F", "FALSE", "false", "False"})

# ASCII digits only, no padding; unsigned kinds take no sign
_SIGNED_DIGITS = re.compile(r"[+-]?[0-9]+")
_UNSIGNED_DIGITS = re.compile(r"[0-9]+")


class IdKind(str, Enum):
    """Native type of a public identifier."""

    STRING = "string"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    BOOL = "bool"

    @classmethod
    def of(cls, python_type: type) -> IdKind:
        """Map a Python type to its default kind (``str``, ``int``, ``bool``)."""
        # bool first: it is a subclass of int
        if python_type is bool:
            return cls.BOOL
        if python_type is int:
            return cls.INT64
        if python_type is str:
            return cls.STRING
        raise ConfigError(f"no identifier kind for type {python_type.__name__}")

    @property
    def is_integer(self) -> bool:
        return self in _INT_RANGES

    @property
    def zero(self) -> Any:
        """Zero value returned by lenient parsing."""
        if self is IdKind.STRING:
            return ""
        if self is IdKind.BOOL:
            return False
        return 0


_INT_RANGES: dict[IdKind, tuple[int, int]] = {
    IdKind.INT8: (-(2**7), 2**7 - 1),
    IdKind.INT16: (-(2**15), 2**15 - 1),
    IdKind.INT32: (-(2**31), 2**31 - 1),
    IdKind.INT64: (-(2**63), 2**63 - 1),
    IdKind.UINT8: (0, 2**8 - 1),
    IdKind.UINT16: (0, 2**16 - 1),
    IdKind.UINT32: (0, 2**32 - 1),
    IdKind.UINT64: (0, 2**64 - 1),
}

# Largest generated value per kind; UINT64 stays within signed BIGINT
_GENERATED_MAX: dict[IdKind, int] = {
    kind: (2**63 - 1 if kind is IdKind.UINT64 else high) for kind, (_, high) in _INT_RANGES.items()
}


@runtime_checkable
class IdGenerator(Protocol):
    """Capability producing and parsing public identifiers."""

    def get_new_id(self) -> Any:
        """Return a fresh identifier. Safe for concurrent callers."""
        ...

    def parse(self, value: str) -> Any:
        """Convert the wire (string) form into the native identifier type."""
        ...


def random_string(length: int) -> str:
    """Return *length* ASCII letters drawn from a cryptographic source."""
    return "".join(secrets.choice(_LETTERS) for _ in range(length))


def new_id(kind: IdKind) -> Any:
    """Generate a fresh identifier of *kind*.

    Raises:
        ConfigError: *kind* has no generator (``BOOL``).
    """
    if kind is IdKind.STRING:
        return str(uuid.uuid4())
    if kind.is_integer:
        return secrets.randbelow(_GENERATED_MAX[kind]) + 1
    raise ConfigError(f"identifier generator not defined for kind {kind.value}").with_context(
        column="public_id"
    )


def parse_id(value: str, kind: IdKind) -> Any:
    """Best-effort conversion of *value* into the native type of *kind*.

    Malformed or out-of-range input yields ``kind.zero``.
    """
    if kind is IdKind.STRING:
        return value
    if kind is IdKind.BOOL:
        if value in _TRUE_STRINGS:
            return True
        if value in _FALSE_STRINGS:
            return False
        logger.debug("id.parse_failed", kind=kind.value, value=value)
        return False

    low, high = _INT_RANGES[kind]
    pattern = _UNSIGNED_DIGITS if low == 0 else _SIGNED_DIGITS
    if not pattern.fullmatch(value):
        logger.debug("id.parse_failed", kind=kind.value, value=value)
        return 0
    parsed = int(value, 10)
    if not low <= parsed <= high:
        logger.debug("id.parse_out_of_range", kind=kind.value, value=value)
        return 0
    return parsed


class DefaultIdGenerator:
    """Kind-dispatching generator used when a service gets no explicit one.

    Construction fails fast for kinds without a generator, so a
    misconfigured service is caught at startup rather than on first insert.
    Pass ``generate=False`` for parse-only use (e.g. boolean keys assigned
    by the caller).
    """

    def __init__(self, kind: IdKind = IdKind.STRING, *, generate: bool = True) -> None:
        if generate and not (kind is IdKind.STRING or kind.is_integer):
            raise ConfigError(f"identifier generator not defined for kind {kind.value}")
        self.kind = kind
        self._generate = generate

    def get_new_id(self) -> Any:
        if not self._generate:
            raise ConfigError(f"generator for kind {self.kind.value} is parse-only")
        return new_id(self.kind)

    def parse(self, value: str) -> Any:
        return parse_id(value, self.kind)

    def __repr__(self) -> str:
        return f"DefaultIdGenerator(kind={self.kind.value})"


__all__ = [
    "IdKind",
    "IdGenerator",
    "DefaultIdGenerator",
    "new_id",
    "parse_id",
    "random_string",
]
