"""Unit tests for the exception hierarchy and the global exception handlers."""

import pytest
from fastapi import FastAPI, HTTPException, Query
from fastapi.testclient import TestClient

from homely.api.exception_handlers import register_exception_handlers
from homely.api.middleware import RequestIDMiddleware
from homely.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    HomelyError,
    InvalidInputError,
    InvalidStatusTransitionError,
    NotFoundError,
    PlanLimitExceededError,
    ValidationError,
)

# =============================================================================
# Exception hierarchy
# =============================================================================


class TestExceptionHierarchy:
    """Tests for status codes, error codes and details."""

    @pytest.mark.parametrize(
        ("exc_class", "status_code", "error_code"),
        [
            (ValidationError, 400, "VALIDATION_ERROR"),
            (InvalidInputError, 400, "INVALID_INPUT"),
            (InvalidStatusTransitionError, 400, "INVALID_STATUS_TRANSITION"),
            (PlanLimitExceededError, 400, "PLAN_LIMIT_EXCEEDED"),
            (AuthenticationError, 401, "AUTHENTICATION_REQUIRED"),
            (AuthorizationError, 403, "ACCESS_DENIED"),
            (NotFoundError, 404, "NOT_FOUND"),
            (ConflictError, 409, "CONFLICT"),
            (ExternalServiceError, 502, "EXTERNAL_SERVICE_ERROR"),
        ],
    )
    def test_defaults(self, exc_class, status_code, error_code):
        exc = exc_class()
        assert isinstance(exc, HomelyError)
        assert exc.status_code == status_code
        assert exc.error_code == error_code

    def test_not_found_builds_message_from_resource(self):
        exc = NotFoundError(resource="Task", resource_id=42)
        assert exc.message == "Task with id 42 not found"
        assert exc.details == {"resource": "Task", "id": "42"}

    def test_invalid_input_truncates_long_values(self):
        exc = InvalidInputError("bad", field="name", value="x" * 500)
        assert exc.details["field"] == "name"
        assert len(exc.details["value"]) == 100

    def test_plan_limit_details(self):
        exc = PlanLimitExceededError(usage_type="tasks", limit=5)
        assert exc.details == {"usage_type": "tasks", "limit": 5}
        assert "upgrade" in exc.message

    def test_to_dict_omits_empty_details(self):
        assert ValidationError("nope").to_dict() == {
            "code": "VALIDATION_ERROR",
            "message": "nope",
        }

    def test_error_code_override(self):
        exc = AuthenticationError("Token has expired", error_code="TOKEN_EXPIRED")
        assert exc.error_code == "TOKEN_EXPIRED"
        assert exc.status_code == 401


# =============================================================================
# Exception handlers
# =============================================================================


@pytest.fixture
def client() -> TestClient:
    app = FastAPI()
    app.add_middleware(RequestIDMiddleware)
    register_exception_handlers(app)

    @app.get("/not-found")
    async def not_found():
        raise NotFoundError(resource="Event", resource_id="abc")

    @app.get("/transition")
    async def transition():
        raise InvalidStatusTransitionError(
            "Event is already completed", current_status="completed", target_status="completed"
        )

    @app.get("/http")
    async def http_error():
        raise HTTPException(status_code=409, detail="Already there")

    @app.get("/typed")
    async def typed(page: int = Query(...)):
        return {"page": page}

    @app.get("/boom")
    async def boom():
        raise RuntimeError("database password is hunter2")

    return TestClient(app, raise_server_exceptions=False)


class TestExceptionHandlers:
    """Tests for the uniform error envelope."""

    def test_domain_error_envelope(self, client):
        response = client.get("/not-found", headers={"X-Request-ID": "req-123"})
        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["message"] == "Event with id abc not found"
        assert error["details"] == {"resource": "Event", "id": "abc"}
        assert error["request_id"] == "req-123"
        assert "timestamp" in error

    def test_transition_error_is_400(self, client):
        response = client.get("/transition")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_STATUS_TRANSITION"

    def test_http_exception_keeps_detail(self, client):
        response = client.get("/http")
        assert response.status_code == 409
        error = response.json()["error"]
        assert error["code"] == "CONFLICT"
        assert error["message"] == "Already there"

    def test_request_validation_lists_fields(self, client):
        response = client.get("/typed", params={"page": "abc"})
        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["errors"][0]["field"] == "query.page"
        assert error["errors"][0]["value"] == "abc"

    def test_unhandled_exception_hides_internals(self, client):
        response = client.get("/boom")
        assert response.status_code == 500
        error = response.json()["error"]
        assert error["code"] == "INTERNAL_ERROR"
        assert error["message"] == "An unexpected error occurred"
        assert "hunter2" not in response.text

    def test_unknown_route_uses_envelope(self, client):
        response = client.get("/missing")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"
