"""
Cookie session storage backed by JWTs.

Implements the session storage contract (get/commit/destroy) on top of
TokenCodec. All session state lives in the cookie; nothing is kept on
the server, so a destroyed session is only gone from the client's
perspective.

Read path:  Cookie header -> token -> TokenCodec.decode -> Session
Write path: Session -> TokenCodec.encode -> token -> Set-Cookie value
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Mapping, Optional, Union

from src.models.session_state import CookieOptions, Session, SessionData, create_session
from src.core.exceptions import CookieTooLargeError, TokenDecodeError, config_error
from src.core.security.cookies import ensure_cookie_size, read_cookie, serialize_cookie
from src.core.security.token_codec import SecurityMode, TokenCodec, select_security_mode

logger = logging.getLogger(__name__)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

OptionsOverride = Optional[Union[CookieOptions, Mapping[str, Any]]]


class JWTSessionStorage:
    """
    Session storage keeping the whole session inside a JWT cookie.

    Configuration is captured at construction and never changes, so one
    instance can serve concurrent requests without locking.
    """

    def __init__(self, cookie: CookieOptions, codec: TokenCodec):
        self.cookie = cookie
        self.codec = codec

    @property
    def mode(self) -> SecurityMode:
        return self.codec.mode

    def _read_token(self, cookie_header: Optional[str], options: OptionsOverride) -> str:
        merged = self.cookie.merged(options)
        return read_cookie(cookie_header, merged.name)

    async def _decode(self, token: str) -> Optional[SessionData]:
        try:
            return await self.codec.decode(token)
        except TokenDecodeError as e:
            logger.debug(f"Discarding unreadable session cookie: {e}")
            return None

    async def get_session(
        self,
        cookie_header: Optional[str] = None,
        options: OptionsOverride = None
    ) -> Session:
        """
        Load the session from a Cookie header.

        A missing, tampered, expired or malformed cookie yields a fresh
        session with empty data and an empty id.
        """
        token = self._read_token(cookie_header, options)
        data = await self._decode(token)

        if data is None:
            return create_session({}, "")

        # The id is the token's last segment (signature or tag), empty for unsecured tokens
        return create_session(data, token.split(".")[-1])

    async def get_jwt(
        self,
        cookie_header: Optional[str] = None,
        options: OptionsOverride = None
    ) -> Optional[str]:
        """Return the raw token from the Cookie header if it decodes, else None"""
        token = self._read_token(cookie_header, options)
        if await self._decode(token) is None:
            return None
        return token

    async def commit_session(self, session: Session, options: OptionsOverride = None) -> str:
        """
        Encode the session into a Set-Cookie header value.

        Raises:
            CookieTooLargeError: If the serialized cookie exceeds 4096 bytes
        """
        merged = self.cookie.merged(options)

        if merged.expires is not None:
            expires = merged.expires
        elif merged.max_age is not None:
            expires = datetime.now(timezone.utc) + timedelta(seconds=merged.max_age)
        else:
            expires = None

        token = await self.codec.encode(session.data, expires)
        serialized = serialize_cookie(merged.name, token, merged)

        try:
            return ensure_cookie_size(serialized)
        except CookieTooLargeError as e:
            logger.error(f"🍪 Session cookie '{merged.name}' too large ({e.length} bytes)")
            raise

    async def destroy_session(self, session: Optional[Session] = None, options: OptionsOverride = None) -> str:
        """Return a Set-Cookie value that expires the session cookie immediately"""
        merged = self.cookie.merged(options).model_copy(update={"expires": EPOCH, "max_age": None})
        return serialize_cookie(merged.name, "", merged)


def create_jwt_session_storage(
    cookie: CookieOptions,
    encrypt: bool = False,
    sign: bool = False,
    strict: bool = False
) -> JWTSessionStorage:
    """
    Build a JWTSessionStorage from cookie options.

    Requesting encryption or signing without a secret downgrades to
    unsecured tokens with a warning, or raises SessionConfigurationError
    when `strict` is set.
    """
    if not cookie.name:
        raise config_error("Cookie name must not be empty", component="cookie.name")

    secret = cookie.secret
    mode = select_security_mode(encrypt, sign, secret)

    if (encrypt or sign) and mode is SecurityMode.UNSECURED:
        if strict:
            raise config_error(
                "Encryption or signing requested but no cookie secret configured",
                component="cookie.secrets"
            )
        logger.warning("⚠️ No cookie secret configured - session tokens will be UNSECURED")

    if encrypt and sign and mode is SecurityMode.ENCRYPTED:
        logger.info("Both encrypt and sign requested - using encrypted tokens")

    logger.info(f"🔐 Session storage for cookie '{cookie.name}' using {mode.value} tokens")
    return JWTSessionStorage(cookie, TokenCodec(mode, secret))


# Global instance - initialized in main.py
session_storage: Optional[JWTSessionStorage] = None


def get_session_storage() -> JWTSessionStorage:
    """
    Get the global session storage instance.

    Follows FastAPI dependency injection pattern.
    """
    if session_storage is None:
        raise config_error("Session storage not initialized", component="session_storage")
    return session_storage


def init_session_storage(
    cookie: CookieOptions,
    encrypt: bool = False,
    sign: bool = False,
    strict: bool = False
) -> JWTSessionStorage:
    """Initialize the global session storage"""
    global session_storage
    session_storage = create_jwt_session_storage(cookie, encrypt=encrypt, sign=sign, strict=strict)
    return session_storage
