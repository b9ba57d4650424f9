"""
Cookie header parsing and serialization.

Wraps werkzeug's cookie codec so the storage adapter only deals with
CookieOptions. The per-cookie size limit is enforced here instead of
relying on werkzeug's warning.
"""

import logging
from typing import Optional

from werkzeug.http import dump_cookie, parse_cookie

from src.models.session_state import CookieOptions
from src.core.exceptions import cookie_size_error

logger = logging.getLogger(__name__)

# Practical per-cookie browser limit, in bytes
MAX_COOKIE_SIZE = 4096


def read_cookie(cookie_header: Optional[str], name: str) -> str:
    """
    Return the value of cookie `name`, or an empty string.

    A header that is not valid UTF-8 once taken back to its latin-1 wire
    bytes cannot be parsed and counts as carrying no session cookie.
    """
    if not cookie_header:
        return ""
    try:
        cookies = parse_cookie(cookie_header)
    except UnicodeError as e:
        logger.debug(f"Ignoring undecodable Cookie header: {type(e).__name__}")
        return ""
    return cookies.get(name) or ""


def serialize_cookie(name: str, value: str, options: CookieOptions) -> str:
    """Build a Set-Cookie header value from the given options"""
    return dump_cookie(
        name,
        value,
        max_age=options.max_age,
        expires=options.expires,
        path=options.path,
        domain=options.domain,
        secure=options.secure,
        httponly=options.http_only,
        samesite=options.same_site,
        max_size=0,
    )


def ensure_cookie_size(serialized: str, limit: int = MAX_COOKIE_SIZE) -> str:
    length = len(serialized.encode("utf-8"))
    if length > limit:
        raise cookie_size_error(length, limit)
    return serialized
