"""
Structured error types for crudkit.

Every failure that crosses the service boundary is one of a small set of
typed errors.  Each carries a category, structured context and an optional
chained cause, so the REST layer can pick a status code and the logs keep
the root cause.

Manifesto:
    - **Typed taxonomy:** validation, not-found, query and configuration
      failures are distinct types, not string matching
    - **Rich context:** errors carry the entity, operation and column involved
    - **Error chaining:** store-level exceptions are preserved as ``cause``
    - **No retries:** nothing in crudkit retries; errors surface once

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                        CrudError                             │
        │            (category, context, cause, to_dict)               │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  ValidationError     NotFoundError      ConfigError          │
        │  (VALIDATION)        (NOT_FOUND)        (CONFIG)             │
        │                                         = ConfigurationError │
        │                                                              │
        │  DatabaseError                                               │
        │  (DATABASE)                                                  │
        │       │                                                      │
        │  QueryError       IntegrityError                             │
        └─────────────────────────────────────────────────────────────┘

Examples:
    >>> err = QueryError("no such column: nme").with_context(entity="contacts")
    >>> err.category
    <ErrorCategory.DATABASE: 'DATABASE'>
    >>> err.context.entity
    'contacts'

Tags:
    error-handling, exception-hierarchy, error-context, crudkit

Doc-Types:
    - API Reference
    - Error Handling Guide
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories used for status mapping and log routing."""

    VALIDATION = "VALIDATION"     # Malformed or absent input
    NOT_FOUND = "NOT_FOUND"       # Lookup yielded no record
    DATABASE = "DATABASE"         # Store rejected the request
    CONFIG = "CONFIG"             # Missing or invalid configuration
    INTERNAL = "INTERNAL"         # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"           # Uncategorized errors


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        entity: Name of the record type (usually its table name)
        operation: Service operation that failed (``find_where``, ``create``...)
        column: Column involved, when the failure concerns a single column
        query: Predicate template that was sent to the store
        metadata: Additional key-value pairs
    """

    entity: str | None = None
    operation: str | None = None
    column: str | None = None
    query: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["entity", "operation", "column", "query"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class CrudError(Exception):
    """
    Base exception for all crudkit errors.

    Subclasses set ``default_category``; callers may override it per
    instance.  Pass ``cause=`` when wrapping a lower-level exception so the
    original is chained as ``__cause__``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> CrudError:
        """
        Add context to this error (fluent API).

        Usage:
            raise QueryError("bad predicate").with_context(
                entity="contacts", query="nme = ?"
            )
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# BOUNDARY ERRORS
# =============================================================================


class ValidationError(CrudError):
    """
    Malformed or absent input at the boundary.

    Raised for a missing entity on create, an update without a public
    identifier, an unparsable sort spec and similar caller mistakes.
    """

    default_category = ErrorCategory.VALIDATION

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        constraint: str | None = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value
        self.constraint = constraint

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        if self.constraint:
            result["constraint"] = self.constraint
        return result


class NotFoundError(CrudError):
    """Lookup by public identifier yielded no record."""

    default_category = ErrorCategory.NOT_FOUND

    def __init__(self, entity: str, public_id: Any, message: str | None = None):
        super().__init__(
            message or f"{entity} '{public_id}' does not exist",
            context=ErrorContext(entity=entity),
        )
        self.public_id = public_id


class ConfigError(CrudError):
    """Missing or invalid configuration, e.g. lookup without a lookup query."""

    default_category = ErrorCategory.CONFIG


ConfigurationError = ConfigError


# =============================================================================
# STORE ERRORS
# =============================================================================


class DatabaseError(CrudError):
    """The record store rejected a request."""

    default_category = ErrorCategory.DATABASE


class QueryError(DatabaseError):
    """Predicate/parameter combination rejected (unknown column, bad syntax...)."""

    pass


class IntegrityError(DatabaseError):
    """Database integrity constraint violation (duplicate public id...)."""

    pass


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "CrudError",
    "ValidationError",
    "NotFoundError",
    "ConfigError",
    "ConfigurationError",
    "DatabaseError",
    "QueryError",
    "IntegrityError",
]
