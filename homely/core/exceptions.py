"""Exception hierarchy for the Homely API.

Every domain error carries a machine-readable ``error_code`` and the HTTP
status it maps to, so services can raise them without knowing about FastAPI
and the global exception handlers can render a uniform response.
"""

from __future__ import annotations

from typing import Any


class HomelyError(Exception):
    """Base exception for all application-specific errors."""

    default_message: str = "An unexpected error occurred"
    default_error_code: str = "INTERNAL_ERROR"
    default_status_code: int = 500

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message or self.default_message
        self.error_code = error_code or self.default_error_code
        self.status_code = status_code or self.default_status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {
            "code": self.error_code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result


# Validation Errors (400)
class ValidationError(HomelyError):
    default_message = "Validation failed"
    default_error_code = "VALIDATION_ERROR"
    default_status_code = 400


class InvalidInputError(ValidationError):
    default_message = "Invalid input provided"
    default_error_code = "INVALID_INPUT"

    def __init__(
        self,
        message: str | None = None,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {}) or {}
        if field:
            details["field"] = field
        if value is not None:
            str_value = str(value)
            details["value"] = str_value[:100] if len(str_value) > 100 else str_value
        super().__init__(message, details=details, **kwargs)


class InvalidStatusTransitionError(ValidationError):
    """Raised when an event cannot move from its current status."""

    default_message = "Invalid status transition"
    default_error_code = "INVALID_STATUS_TRANSITION"

    def __init__(
        self,
        message: str | None = None,
        *,
        current_status: str | None = None,
        target_status: str | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {}) or {}
        if current_status is not None:
            details["current_status"] = current_status
        if target_status is not None:
            details["target_status"] = target_status
        super().__init__(message, details=details, **kwargs)


class PlanLimitExceededError(ValidationError):
    """Raised when an action would exceed the household's subscription plan."""

    default_message = "Plan limit reached. Please upgrade to a premium plan."
    default_error_code = "PLAN_LIMIT_EXCEEDED"

    def __init__(
        self,
        message: str | None = None,
        *,
        usage_type: str | None = None,
        limit: int | None = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {}) or {}
        if usage_type is not None:
            details["usage_type"] = usage_type
        if limit is not None:
            details["limit"] = limit
        super().__init__(message, details=details, **kwargs)


# Auth Errors
class AuthenticationError(HomelyError):
    default_message = "Authentication required"
    default_error_code = "AUTHENTICATION_REQUIRED"
    default_status_code = 401


class AuthorizationError(HomelyError):
    default_message = "Access denied"
    default_error_code = "ACCESS_DENIED"
    default_status_code = 403


# Not Found Errors (404)
class NotFoundError(HomelyError):
    default_message = "Resource not found"
    default_error_code = "NOT_FOUND"
    default_status_code = 404

    def __init__(
        self,
        message: str | None = None,
        *,
        resource: str | None = None,
        resource_id: Any = None,
        **kwargs: Any,
    ) -> None:
        details = kwargs.pop("details", {}) or {}
        if resource is not None:
            details["resource"] = resource
        if resource_id is not None:
            details["id"] = str(resource_id)
        if message is None and resource is not None:
            message = f"{resource} with id {resource_id} not found"
        super().__init__(message, details=details, **kwargs)


# Conflict Errors (409)
class ConflictError(HomelyError):
    default_message = "Resource already exists"
    default_error_code = "CONFLICT"
    default_status_code = 409


# External Service Errors (502)
class ExternalServiceError(HomelyError):
    default_message = "External service request failed"
    default_error_code = "EXTERNAL_SERVICE_ERROR"
    default_status_code = 502

    def __init__(
        self,
        message: str | None = None,
        *,
        service_name: str | None = None,
        **kwargs: Any,
    ) -> None:
        self.service_name = service_name
        details = kwargs.pop("details", {}) or {}
        if service_name:
            details["service"] = service_name
        super().__init__(message, details=details, **kwargs)
