# tests/test_rate_limit.py
"""Tests for rate limit key extraction, tiers and messages"""

from unittest.mock import Mock

import pytest

from src.core.rate_limit_config import (
    RATE_LIMIT_TIERS,
    get_endpoint_key,
    get_rate_limit_message,
    get_rate_limits,
    get_real_ip
)
from src.main import custom_rate_limit_handler


def make_request(headers=None, host="10.0.0.1", method="GET", path="/session"):
    request = Mock()
    request.headers = headers or {}
    request.client.host = host
    request.method = method
    request.url.path = path
    return request


def test_forwarded_for_takes_first_ip():
    request = make_request({"X-Forwarded-For": "203.0.113.5, 10.0.0.2"})
    assert get_real_ip(request) == "203.0.113.5"


def test_real_ip_header():
    request = make_request({"X-Real-IP": "198.51.100.7"})
    assert get_real_ip(request) == "198.51.100.7"


def test_falls_back_to_client_host():
    assert get_real_ip(make_request()) == "10.0.0.1"


def test_tiers_cover_session_endpoints():
    for tier in RATE_LIMIT_TIERS.values():
        assert set(tier) == {"session_read", "session_write", "session_destroy"}


def test_trusted_tier_is_selectable():
    assert get_rate_limits("trusted") is RATE_LIMIT_TIERS["trusted"]


def test_unknown_tier_falls_back_to_default():
    assert get_rate_limits("missing") is RATE_LIMIT_TIERS["default"]


@pytest.mark.parametrize("method,path,expected", [
    ("GET", "/session", "session_read"),
    ("get", "/session/token", "session_read"),
    ("POST", "/session", "session_write"),
    ("DELETE", "/session", "session_destroy"),
    ("GET", "/health", "default"),
])
def test_endpoint_key(method, path, expected):
    assert get_endpoint_key(method, path) == expected


def test_unknown_endpoint_message_falls_back():
    assert get_rate_limit_message("unknown") == get_rate_limit_message("default")


def test_handler_uses_endpoint_message():
    request = make_request(method="POST", path="/session")
    response = custom_rate_limit_handler(request, Mock(limit="60 per 1 minute"))

    assert response.status_code == 429
    assert response.body.decode() == get_rate_limit_message("session_write")
    assert response.headers["Retry-After"] == "60"


def test_handler_default_message_for_reads():
    response = custom_rate_limit_handler(make_request(), Mock(limit="120 per 1 minute"))
    assert response.body.decode() == get_rate_limit_message("default")
