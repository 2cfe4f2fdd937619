"""Tests for the rate-limit bucket key."""
from starlette.requests import Request

from conftest import OWNER_ID

from assetbridge.core.limiter import owner_or_remote_address
from assetbridge.core.security import create_access_token


def _request(headers: dict[str, str] | None = None) -> Request:
    scope = {
        "type": "http",
        "method": "POST",
        "path": "/api/v1/import/assets",
        "headers": [(k.lower().encode(), v.encode()) for k, v in (headers or {}).items()],
        "client": ("203.0.113.7", 51000),
    }
    return Request(scope)


def test_valid_token_buckets_by_owner():
    token = create_access_token("user-1", str(OWNER_ID), "acme")
    key = owner_or_remote_address(_request({"Authorization": f"Bearer {token}"}))
    assert key == f"owner:{OWNER_ID}"


def test_invalid_token_falls_back_to_client_address():
    assert owner_or_remote_address(_request({"Authorization": "Bearer nope"})) == "203.0.113.7"


def test_anonymous_request_uses_client_address():
    assert owner_or_remote_address(_request()) == "203.0.113.7"
