"""
Security layer for cookie sessions.

Centralizes all token and cookie handling:
- JWT encoding/decoding in encrypted, signed or unsecured mode
- Cookie header parsing and serialization
- Session storage (get/commit/destroy) on top of both

Everything here is stateless apart from the configuration captured
when the storage is created.
"""

from .token_codec import (
    SecurityMode,
    TokenCodec,
    select_security_mode
)
from .cookies import MAX_COOKIE_SIZE
from .session_storage import (
    JWTSessionStorage,
    create_jwt_session_storage,
    get_session_storage,
    init_session_storage
)

__all__ = [
    'SecurityMode',
    'TokenCodec',
    'select_security_mode',
    'MAX_COOKIE_SIZE',
    'JWTSessionStorage',
    'create_jwt_session_storage',
    'get_session_storage',
    'init_session_storage'
]
