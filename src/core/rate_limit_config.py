"""
Rate limiting configuration for the session API
"""

from typing import Dict

from fastapi import Request
from slowapi.util import get_remote_address


def get_real_ip(request: Request) -> str:
    """
    Get the real IP address, considering proxy headers.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # X-Forwarded-For can contain multiple IPs, take the first
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip

    return get_remote_address(request)


RATE_LIMIT_TIERS = {
    "default": {
        "session_read": "120/minute",
        "session_write": "60/minute",
        "session_destroy": "30/minute",
    },
    "trusted": {
        "session_read": "600/minute",
        "session_write": "300/minute",
        "session_destroy": "150/minute",
    }
}

RATE_LIMIT_MESSAGES = {
    "default": "Too many requests. Please wait a moment and try again.",
    "session_write": "Too many session updates. Please slow down.",
    "session_destroy": "Too many session resets. Please wait a moment.",
}


# Rate limit bucket for each session route
ENDPOINT_LIMITS = {
    ("GET", "/session"): "session_read",
    ("GET", "/session/token"): "session_read",
    ("POST", "/session"): "session_write",
    ("DELETE", "/session"): "session_destroy",
}


def get_rate_limits(tier: str) -> Dict[str, str]:
    """Limits for a tier, falling back to the default tier"""
    return RATE_LIMIT_TIERS.get(tier, RATE_LIMIT_TIERS["default"])


def get_endpoint_key(method: str, path: str) -> str:
    return ENDPOINT_LIMITS.get((method.upper(), path), "default")


def get_rate_limit_message(endpoint: str) -> str:
    """Get custom error message for rate limited endpoint"""
    return RATE_LIMIT_MESSAGES.get(endpoint, RATE_LIMIT_MESSAGES["default"])
