from __future__ import annotations

import json

from snapapi_client.errors import ApiError, AuthError
from snapapi_client.errors_utils import normalize_error


def test_well_formed_error_body() -> None:
    body = json.dumps({"error": {"code": "RATE_LIMITED", "message": "too many requests"}})
    err = normalize_error(429, body.encode())
    assert type(err) is ApiError
    assert err.code == "RATE_LIMITED"
    assert err.message == "too many requests"
    assert err.status_code == 429
    assert err.details is None


def test_details_are_kept_when_mapping() -> None:
    body = json.dumps({"error": {"code": "INVALID_OPTIONS", "message": "bad", "details": {"field": "width"}}})
    err = normalize_error(400, body)
    assert err.details == {"field": "width"}


def test_non_mapping_details_are_dropped() -> None:
    body = json.dumps({"error": {"code": "X", "message": "Y", "details": ["width"]}})
    assert normalize_error(400, body).details is None


def test_empty_body_falls_back() -> None:
    err = normalize_error(502, b"")
    assert err.code == "UNKNOWN_ERROR"
    assert err.message == "HTTP 502"
    assert err.status_code == 502


def test_non_json_body_falls_back() -> None:
    err = normalize_error(500, b"<html>Internal Server Error</html>")
    assert err.code == "UNKNOWN_ERROR"
    assert str(err) == "HTTP 500"


def test_wrong_shape_falls_back() -> None:
    err = normalize_error(404, json.dumps({"detail": "not found"}))
    assert err.code == "UNKNOWN_ERROR"
    assert err.message == "HTTP 404"


def test_partial_error_object() -> None:
    err = normalize_error(400, json.dumps({"error": {"message": "url is invalid"}}))
    assert err.code == "UNKNOWN_ERROR"
    assert err.message == "url is invalid"

    err = normalize_error(400, json.dumps({"error": {"code": "INVALID_URL"}}))
    assert err.code == "INVALID_URL"
    assert err.message == "HTTP 400"


def test_auth_statuses_produce_auth_error() -> None:
    body = json.dumps({"error": {"code": "INVALID_API_KEY", "message": "bad key"}})
    for status in (401, 403):
        err = normalize_error(status, body)
        assert isinstance(err, AuthError)
        assert err.code == "INVALID_API_KEY"
        assert err.status_code == status


def test_structural_equality() -> None:
    body = json.dumps({"error": {"code": "X", "message": "Y"}})
    assert normalize_error(400, body) == normalize_error(400, body)
    assert normalize_error(400, body) != normalize_error(409, body)
