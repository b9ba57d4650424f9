# tests/helpers.py
"""Helpers shared by the session tests"""

import base64
import json

SECRET = "s3cr3t"
OTHER_SECRET = "another-secret"


def cookie_header(set_cookie: str) -> str:
    """Turn a Set-Cookie value into the matching Cookie request header"""
    return set_cookie.split(";", 1)[0]


def token_from(set_cookie: str) -> str:
    return cookie_header(set_cookie).split("=", 1)[1]


def decode_segment(segment: str) -> dict:
    padded = segment + "=" * (-len(segment) % 4)
    return json.loads(base64.urlsafe_b64decode(padded))


def tamper(token: str, index: int = -1) -> str:
    """Replace the first character of a token segment"""
    segments = token.split(".")
    segment = segments[index]
    replacement = "A" if segment[0] != "A" else "B"
    segments[index] = replacement + segment[1:]
    return ".".join(segments)
