"""Exception hierarchy for the API conventions core.

Every error raised by the codecs, the connection resolver, the update merger
and the resolver registry derives from :class:`AppException`. Each carries an
HTTP-style status code, an RFC 7807 problem type and a machine-readable
``code`` that the GraphQL boundary copies into ``extensions.code``.
"""

from __future__ import annotations

from typing import Any, ClassVar


class AppException(Exception):
    """Base application exception.

    Follows RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.
        code: Machine-readable error code surfaced to API clients.

    Example:
        raise AppException(
            status_code=404,
            detail="Resource not found",
            type="resource-not-found",
            extra={"resource_id": "abc123"},
        )
    """

    code: ClassVar[str] = "APP_ERROR"

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code."""
        titles = {
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden",
            404: "Not Found",
            409: "Conflict",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
        }
        return titles.get(status_code, "Error")

    def to_problem_details(self) -> dict[str, Any]:
        """Render the exception as an RFC 7807 problem details document."""
        problem: dict[str, Any] = {
            "type": self.type,
            "title": self.title,
            "status": self.status_code,
            "detail": self.detail,
            "code": self.code,
        }
        if self.instance:
            problem["instance"] = self.instance
        problem.update(self.extra)
        return problem


class NotFoundException(AppException):
    """Exception raised when a resource is not found.

    Example:
        raise NotFoundException(
            detail="User with ID 42 not found",
            extra={"local_id": "42"},
        )
    """

    code: ClassVar[str] = "NOT_FOUND"

    def __init__(
        self,
        detail: str,
        type: str = "not-found",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=404,
            detail=detail,
            type=type,
            title="Not Found",
            instance=instance,
            extra=extra,
        )


class ValidationException(AppException):
    """Exception raised for validation errors.

    Example:
        raise ValidationException(
            detail="Email address is invalid",
            extra={"field": "email"},
        )
    """

    code: ClassVar[str] = "VALIDATION_ERROR"

    def __init__(
        self,
        detail: str,
        type: str = "validation-error",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=422,
            detail=detail,
            type=type,
            title="Validation Error",
            instance=instance,
            extra=extra,
        )


class BadRequestException(AppException):
    """Exception raised for malformed client input."""

    code: ClassVar[str] = "BAD_REQUEST"

    def __init__(
        self,
        detail: str,
        type: str = "bad-request",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=400,
            detail=detail,
            type=type,
            title="Bad Request",
            instance=instance,
            extra=extra,
        )


class ForbiddenException(AppException):
    """Exception raised for authorization failures."""

    code: ClassVar[str] = "FORBIDDEN"

    def __init__(
        self,
        detail: str,
        type: str = "forbidden",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=403,
            detail=detail,
            type=type,
            title="Forbidden",
            instance=instance,
            extra=extra,
        )


class InternalServerException(AppException):
    """Exception raised for server-side misconfiguration."""

    code: ClassVar[str] = "INTERNAL_ERROR"

    def __init__(
        self,
        detail: str,
        type: str = "internal-error",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=500,
            detail=detail,
            type=type,
            title="Internal Server Error",
            instance=instance,
            extra=extra,
        )


# ============================================================================
# Opaque Token Errors
# ============================================================================


class InvalidIdentifierError(BadRequestException):
    """Raised when a global identifier cannot be encoded or decoded.

    Example:
        raise InvalidIdentifierError("Unknown type 'Widget'", token="V2lk...")
    """

    code: ClassVar[str] = "INVALID_IDENTIFIER"

    def __init__(
        self,
        detail: str = "Invalid identifier",
        token: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        final_extra: dict[str, Any] = {"identifier": token} if token is not None else {}
        if extra:
            final_extra.update(extra)
        super().__init__(detail=detail, type="invalid-identifier", extra=final_extra or None)


class InvalidCursorError(BadRequestException):
    """Raised when a pagination cursor is malformed or from another ordering."""

    code: ClassVar[str] = "INVALID_CURSOR"

    def __init__(
        self,
        detail: str = "Invalid cursor",
        cursor: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        final_extra: dict[str, Any] = {"cursor": cursor} if cursor is not None else {}
        if extra:
            final_extra.update(extra)
        super().__init__(detail=detail, type="invalid-cursor", extra=final_extra or None)


# ============================================================================
# Pagination Argument Errors
# ============================================================================


class InvalidArgumentsError(BadRequestException):
    """Raised for contradictory or non-positive connection arguments."""

    code: ClassVar[str] = "INVALID_ARGUMENTS"

    def __init__(
        self,
        detail: str,
        arguments: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            detail=detail,
            type="invalid-arguments",
            extra={"arguments": arguments} if arguments else None,
        )


class PageSizeExceededError(BadRequestException):
    """Raised when ``first``/``last`` exceeds the page-size ceiling."""

    code: ClassVar[str] = "PAGE_SIZE_EXCEEDED"

    def __init__(self, requested: int, maximum: int) -> None:
        self.requested = requested
        self.maximum = maximum
        super().__init__(
            detail=f"Requested page size {requested} exceeds the maximum of {maximum}",
            type="page-size-exceeded",
            extra={"requested": requested, "maximum": maximum},
        )


# ============================================================================
# Mutation Input Errors
# ============================================================================


class FieldNotUpdatableError(ValidationException):
    """Raised when an update names a field outside the entity's update set."""

    code: ClassVar[str] = "FIELD_NOT_UPDATABLE"

    def __init__(self, field: str, entity: str | None = None) -> None:
        self.field = field
        target = f"{entity}.{field}" if entity else field
        super().__init__(
            detail=f"Field '{target}' cannot be updated",
            type="field-not-updatable",
            extra={"field": field, "entity": entity},
        )


class NullNotAllowedError(ValidationException):
    """Raised when an explicit null targets a non-nullable field."""

    code: ClassVar[str] = "NULL_NOT_ALLOWED"

    def __init__(self, field: str, entity: str | None = None) -> None:
        self.field = field
        target = f"{entity}.{field}" if entity else field
        super().__init__(
            detail=f"Field '{target}' cannot be null",
            type="null-not-allowed",
            extra={"field": field, "entity": entity},
        )


class MissingRequiredFieldError(ValidationException):
    """Raised when a create input omits declared-required fields."""

    code: ClassVar[str] = "MISSING_REQUIRED_FIELD"

    def __init__(self, fields: list[str], entity: str | None = None) -> None:
        self.fields = list(fields)
        super().__init__(
            detail=f"Missing required field(s): {', '.join(self.fields)}",
            type="missing-required-field",
            extra={"fields": self.fields, "entity": entity},
        )


class UnknownFieldError(ValidationException):
    """Raised when a create input names a field the entity does not declare."""

    code: ClassVar[str] = "UNKNOWN_FIELD"

    def __init__(self, field: str, entity: str | None = None) -> None:
        self.field = field
        super().__init__(
            detail=f"Unknown field '{field}'",
            type="unknown-field",
            extra={"field": field, "entity": entity},
        )


# ============================================================================
# Registry Errors
# ============================================================================


class MissingResolverError(InternalServerException):
    """A declared schema field has no resolver."""

    code: ClassVar[str] = "MISSING_RESOLVER"

    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(
            detail=f"No resolver registered for field '{field}'",
            type="missing-resolver",
            extra={"field": field},
        )


class OrphanResolverError(InternalServerException):
    """A registered resolver is bound to a field the schema does not declare."""

    code: ClassVar[str] = "ORPHAN_RESOLVER"

    def __init__(self, handle: str, field: str) -> None:
        self.handle = handle
        self.field = field
        super().__init__(
            detail=f"Resolver '{handle}' targets undeclared field '{field}'",
            type="orphan-resolver",
            extra={"handle": handle, "field": field},
        )


class DuplicateResolverError(InternalServerException):
    """More than one resolver is registered for the same field."""

    code: ClassVar[str] = "DUPLICATE_RESOLVER"

    def __init__(self, field: str, handles: list[str]) -> None:
        self.field = field
        self.handles = list(handles)
        super().__init__(
            detail=f"Field '{field}' has {len(self.handles)} resolvers: {', '.join(self.handles)}",
            type="duplicate-resolver",
            extra={"field": field, "handles": self.handles},
        )


class SharedResolverError(InternalServerException):
    """One resolver is bound to several fields."""

    code: ClassVar[str] = "SHARED_RESOLVER"

    def __init__(self, handle: str, fields: list[str]) -> None:
        self.handle = handle
        self.fields = list(fields)
        super().__init__(
            detail=f"Resolver '{handle}' is bound to several fields: {', '.join(self.fields)}",
            type="shared-resolver",
            extra={"handle": handle, "fields": self.fields},
        )


class RegistryValidationError(InternalServerException):
    """Startup failure listing every field/resolver inconsistency found.

    Attributes:
        violations: All violations collected in one validation pass.
    """

    code: ClassVar[str] = "REGISTRY_INVALID"

    def __init__(self, violations: list[AppException]) -> None:
        self.violations = tuple(violations)
        lines = "\n".join(f"  - [{v.code}] {v.detail}" for v in self.violations)
        super().__init__(
            detail=f"Resolver registry is inconsistent ({len(self.violations)} violation(s)):\n{lines}",
            type="registry-invalid",
            extra={"violations": [{"code": v.code, **v.extra} for v in self.violations]},
        )

    @property
    def missing(self) -> list[MissingResolverError]:
        return [v for v in self.violations if isinstance(v, MissingResolverError)]

    @property
    def orphans(self) -> list[OrphanResolverError]:
        return [v for v in self.violations if isinstance(v, OrphanResolverError)]


# ============================================================================
# Authorization
# ============================================================================


class UnauthorizedError(ForbiddenException):
    """Authorization gate denied an action; passed through unchanged.

    Example:
        raise UnauthorizedError(action="user.update", resource="User:42")
    """

    code: ClassVar[str] = "UNAUTHORIZED"

    def __init__(
        self,
        action: str | None = None,
        resource: str | None = None,
        detail: str | None = None,
    ) -> None:
        if detail is None:
            detail = "Not authorized"
            if action:
                detail = f"Not authorized to perform '{action}'"
        final_extra: dict[str, Any] = {}
        if action:
            final_extra["action"] = action
        if resource:
            final_extra["resource"] = resource
        super().__init__(detail=detail, type="unauthorized", extra=final_extra or None)


__all__ = [
    "AppException",
    "BadRequestException",
    "DuplicateResolverError",
    "FieldNotUpdatableError",
    "ForbiddenException",
    "InternalServerException",
    "InvalidArgumentsError",
    "InvalidCursorError",
    "InvalidIdentifierError",
    "MissingRequiredFieldError",
    "MissingResolverError",
    "NotFoundException",
    "NullNotAllowedError",
    "OrphanResolverError",
    "PageSizeExceededError",
    "RegistryValidationError",
    "SharedResolverError",
    "UnauthorizedError",
    "UnknownFieldError",
    "ValidationException",
]
