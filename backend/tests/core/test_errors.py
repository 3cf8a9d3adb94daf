"""Error Hierarchy — tests for HTTP mapping and response envelopes.

Tests cover:
    - Each error maps to its HTTP status and code
    - to_response envelope shape; reasons included only when present
"""

import pytest

from teammatch.core.errors import (
    ConflictError, DatabaseError, DuplicateApplicationError, ErrorContext,
    ForbiddenError, IneligibleApplicationError, InvalidStateError, PositionFullError,
    ProjectValidationError, ResourceNotFoundError, UnauthenticatedError,
)


@pytest.mark.parametrize("error, status, code", [
    (ProjectValidationError("bad", "name"), 400, "VALIDATION_ERROR"),
    (UnauthenticatedError(), 401, "UNAUTHENTICATED"),
    (ForbiddenError("delete this project"), 403, "FORBIDDEN"),
    (ResourceNotFoundError("Project", "x"), 404, "RESOURCE_NOT_FOUND"),
    (ConflictError("already applied"), 409, "CONFLICT"),
    (PositionFullError(["PM"]), 409, "POSITION_FULL"),
    (DuplicateApplicationError(["already applied"]), 409, "DUPLICATE_APPLICATION"),
    (InvalidStateError("no", "ACCEPTED"), 409, "INVALID_STATE"),
    (IneligibleApplicationError(["already applied"]), 422, "INELIGIBLE_APPLICATION"),
    (DatabaseError("down", "execute"), 503, "DATABASE_ERROR"),
])
def test_http_mapping(error, status, code):
    assert error.http_status == status
    assert error.code == code


def test_response_envelope():
    error = ResourceNotFoundError(
        "Project", "abc", ErrorContext(project_id="abc"),
    )
    body = error.to_response()["error"]
    assert body["message"] == "Project 'abc' not found"
    assert body["category"] == "resource_not_found"
    assert body["context"] == {"user_id": None, "project_id": "abc"}
    assert "reasons" not in body


def test_ineligible_response_carries_reasons():
    body = IneligibleApplicationError(["BACKEND is full"]).to_response()["error"]
    assert body["reasons"] == ["BACKEND is full"]


def test_position_full_is_a_conflict():
    error = PositionFullError(["BACKEND", "AI"])
    assert isinstance(error, ConflictError)
    assert error.to_response()["error"]["reasons"] == ["BACKEND is full", "AI is full"]


def test_forbidden_message_names_action():
    assert ForbiddenError("update this project").message == "Not allowed to update this project"
