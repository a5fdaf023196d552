"""Tests for crudkit.core.errors module."""

import pytest

from crudkit.core.errors import (
    ConfigError,
    ConfigurationError,
    CrudError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    IntegrityError,
    NotFoundError,
    QueryError,
    ValidationError,
)


class TestErrorContext:
    def test_to_dict_skips_unset(self):
        ctx = ErrorContext(entity="contacts", operation="find_where")
        assert ctx.to_dict() == {"entity": "contacts", "operation": "find_where"}

    def test_metadata_merged(self):
        ctx = ErrorContext(column="email", metadata={"rows": 3})
        assert ctx.to_dict() == {"column": "email", "rows": 3}


class TestCrudError:
    def test_default_category(self):
        assert CrudError("boom").category is ErrorCategory.INTERNAL

    def test_category_override(self):
        assert CrudError("boom", category=ErrorCategory.CONFIG).category is ErrorCategory.CONFIG

    def test_with_context_known_and_extra_keys(self):
        err = QueryError("bad").with_context(entity="contacts", query="x = ?", attempt=1)
        assert err.context.entity == "contacts"
        assert err.context.query == "x = ?"
        assert err.context.metadata == {"attempt": 1}

    def test_with_context_returns_self(self):
        err = CrudError("x")
        assert err.with_context(entity="t") is err

    def test_cause_chained(self):
        root = RuntimeError("driver")
        err = DatabaseError("wrapped", cause=root)
        assert err.__cause__ is root
        assert err.to_dict()["cause"] == "driver"

    def test_to_dict(self):
        data = NotFoundError("contacts", "abc").to_dict()
        assert data["error_type"] == "NotFoundError"
        assert data["category"] == "NOT_FOUND"
        assert data["context"] == {"entity": "contacts"}
        assert "abc" in data["message"]

    def test_repr(self):
        assert repr(ConfigError("missing")) == "ConfigError('missing', category=CONFIG)"


class TestTaxonomy:
    @pytest.mark.parametrize(
        "error, category",
        [
            (ValidationError("v"), ErrorCategory.VALIDATION),
            (NotFoundError("t", 1), ErrorCategory.NOT_FOUND),
            (ConfigError("c"), ErrorCategory.CONFIG),
            (QueryError("q"), ErrorCategory.DATABASE),
            (IntegrityError("i"), ErrorCategory.DATABASE),
        ],
    )
    def test_categories(self, error, category):
        assert error.category is category
        assert isinstance(error, CrudError)

    def test_store_errors_share_base(self):
        assert issubclass(QueryError, DatabaseError)
        assert issubclass(IntegrityError, DatabaseError)

    def test_configuration_alias(self):
        assert ConfigurationError is ConfigError

    def test_validation_details(self):
        err = ValidationError("bad sort", field="sort", value="a;b", constraint="identifier")
        data = err.to_dict()
        assert data["field"] == "sort"
        assert data["value"] == "'a;b'"
        assert data["constraint"] == "identifier"

    def test_not_found_keeps_id(self):
        assert NotFoundError("tags", 42).public_id == 42
