"""GraphQL error presentation and production error masking.

Errors raised from the ``AppException`` hierarchy are intentional and carry a
machine-readable code; they reach the client with that code under
``extensions.code``. Anything else is unexpected: it is logged with its stack
trace and masked as ``INTERNAL_ERROR`` in production, or annotated with debug
information otherwise.

Usage:
    schema = strawberry.Schema(
        query=Query,
        mutation=Mutation,
        extensions=[ApiErrorExtension],
    )
"""

from __future__ import annotations

import logging
import traceback
from typing import TYPE_CHECKING, Any

from graphql import GraphQLError
from strawberry.extensions import SchemaExtension

from relaykit.core.exceptions import AppException

if TYPE_CHECKING:
    from collections.abc import Iterator

    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)

__all__ = [
    "ApiErrorExtension",
    "ErrorCategory",
    "format_app_error",
    "is_user_facing_error",
    "mask_internal_error",
    "process_graphql_errors",
]


class ErrorCategory:
    """Codes used for errors that do not come from ``AppException``."""

    GRAPHQL_VALIDATION = "GRAPHQL_VALIDATION_FAILED"
    INTERNAL = "INTERNAL_ERROR"


def _rebuild(error: GraphQLError, message: str, extensions: dict[str, Any]) -> GraphQLError:
    return GraphQLError(
        message,
        nodes=error.nodes,
        source=error.source,
        positions=error.positions,
        path=error.path,
        original_error=error.original_error,
        extensions=extensions,
    )


def is_user_facing_error(error: GraphQLError) -> bool:
    """Errors safe to show as-is: ``AppException`` and document errors.

    Errors without an original exception come from parsing or validating the
    document itself, not from resolver code.
    """
    return error.original_error is None or isinstance(error.original_error, AppException)


def format_app_error(error: GraphQLError) -> GraphQLError:
    """Present an ``AppException`` with its code and problem details.

    Example extensions:
        {"code": "INVALID_CURSOR", "status": 400, "type": "invalid-cursor", "cursor": "..."}
    """
    exc = error.original_error
    if not isinstance(exc, AppException):
        raise TypeError("format_app_error() expects an error raised from AppException")
    extensions = {
        **(error.extensions or {}),
        "code": exc.code,
        "status": exc.status_code,
        "type": exc.type,
        **exc.extra,
    }
    return _rebuild(error, exc.detail, extensions)


def mask_internal_error(error: GraphQLError) -> GraphQLError:
    """Replace internal error details with a generic message.

    Location and path are preserved.
    """
    return GraphQLError(
        "An internal error occurred. Please try again later.",
        nodes=error.nodes,
        source=error.source,
        positions=error.positions,
        path=error.path,
        extensions={"code": ErrorCategory.INTERNAL},
    )


def log_error(error: GraphQLError, execution_context: ExecutionContext | None = None) -> None:
    """Log an error with full details for server-side debugging."""
    log_context: dict[str, Any] = {
        "error_message": error.message,
        "error_path": error.path,
    }
    if execution_context is not None and execution_context.operation_name:
        log_context["operation_name"] = execution_context.operation_name

    original = error.original_error
    if isinstance(original, AppException):
        log_context["error_code"] = original.code
        logger.info("GraphQL user-facing error", extra=log_context)
        return
    if original is None:
        logger.info("GraphQL document error", extra=log_context)
        return

    log_context["exception_type"] = type(original).__name__
    log_context["stack_trace"] = "".join(
        traceback.format_exception(type(original), original, original.__traceback__)
    )
    logger.error("GraphQL internal error", extra=log_context)


def process_graphql_errors(
    errors: list[GraphQLError],
    execution_context: ExecutionContext | None = None,
    *,
    is_production: bool | None = None,
) -> list[GraphQLError]:
    """Process GraphQL errors before returning them to the client.

    This function:
    1. Logs all errors with full details server-side
    2. Adds the ``AppException`` code to user-facing errors
    3. Masks internal errors in production
    4. Adds debug info to internal errors elsewhere

    Args:
        errors: Errors from execution.
        execution_context: Execution context with operation info.
        is_production: Override of ``AppSettings.is_production``.
    """
    if is_production is None:
        from relaykit.core.settings import get_app_settings

        is_production = get_app_settings().is_production

    processed: list[GraphQLError] = []
    for error in errors:
        log_error(error, execution_context)

        if isinstance(error.original_error, AppException):
            processed.append(format_app_error(error))
        elif error.original_error is None:
            extensions = {"code": ErrorCategory.GRAPHQL_VALIDATION, **(error.extensions or {})}
            processed.append(_rebuild(error, error.message, extensions))
        elif is_production:
            processed.append(mask_internal_error(error))
        else:
            original = error.original_error
            extensions = {
                **(error.extensions or {}),
                "code": ErrorCategory.INTERNAL,
                "debug": {
                    "exception_type": type(original).__name__,
                    "exception_message": str(original),
                },
            }
            processed.append(_rebuild(error, error.message, extensions))
    return processed


class ApiErrorExtension(SchemaExtension):
    """Strawberry extension applying :func:`process_graphql_errors` to every result."""

    def on_operation(self) -> Iterator[None]:
        yield
        result = self.execution_context.result
        if result is not None and getattr(result, "errors", None):
            result.errors = process_graphql_errors(result.errors, self.execution_context)
