"""Tests for GraphQL error presentation and masking."""
from __future__ import annotations

import pytest
from graphql import GraphQLError

from relaykit.core.exceptions import InvalidCursorError, PageSizeExceededError
from relaykit.features.graphql.error_handler import (
    ErrorCategory,
    format_app_error,
    is_user_facing_error,
    mask_internal_error,
    process_graphql_errors,
)


def wrap(exc: Exception | None, message: str = "failed") -> GraphQLError:
    return GraphQLError(message, path=["users"], original_error=exc)


@pytest.mark.unit
class TestFormatAppError:
    """Tests for format_app_error."""

    def test_code_and_context_in_extensions(self):
        error = format_app_error(wrap(PageSizeExceededError(500, 100)))

        assert error.message == "Requested page size 500 exceeds the maximum of 100"
        assert error.extensions["code"] == "PAGE_SIZE_EXCEEDED"
        assert error.extensions["status"] == 400
        assert error.extensions["maximum"] == 100
        assert error.path == ["users"]

    def test_requires_app_exception(self):
        with pytest.raises(TypeError):
            format_app_error(wrap(RuntimeError("boom")))


@pytest.mark.unit
class TestProcessErrors:
    """Tests for process_graphql_errors."""

    def test_app_errors_are_user_facing(self):
        error = wrap(InvalidCursorError("Malformed cursor", cursor="abc"))

        assert is_user_facing_error(error)
        (processed,) = process_graphql_errors([error], is_production=True)

        assert processed.extensions["code"] == "INVALID_CURSOR"
        assert processed.message == "Malformed cursor"

    def test_internal_errors_masked_in_production(self):
        (processed,) = process_graphql_errors(
            [wrap(RuntimeError("db password is hunter2"))], is_production=True
        )

        assert processed.extensions == {"code": ErrorCategory.INTERNAL}
        assert "hunter2" not in processed.message
        assert processed.path == ["users"]

    def test_internal_errors_annotated_outside_production(self):
        (processed,) = process_graphql_errors([wrap(RuntimeError("boom"))], is_production=False)

        assert processed.extensions["code"] == ErrorCategory.INTERNAL
        assert processed.extensions["debug"] == {
            "exception_type": "RuntimeError",
            "exception_message": "boom",
        }

    def test_document_errors_get_validation_code(self):
        (processed,) = process_graphql_errors(
            [GraphQLError("Cannot query field 'nope' on type 'Query'.")], is_production=True
        )

        assert processed.extensions["code"] == ErrorCategory.GRAPHQL_VALIDATION
        assert "nope" in processed.message

    def test_environment_from_settings(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("APP_ENVIRONMENT", "production")

        (processed,) = process_graphql_errors([wrap(RuntimeError("secret"))])

        assert processed.message == mask_internal_error(wrap(None)).message
