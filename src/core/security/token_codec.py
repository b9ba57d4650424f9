"""
Token codec for cookie sessions.

Turns session data into a compact JWT and back under one of three
security modes:

- ENCRYPTED: JWE, PBES2-HS512+A256KW key wrap with A256GCM content
  encryption, key derived from the secret (jwcrypto)
- SIGNED: JWS with HS256 (PyJWT)
- UNSECURED: `alg: none` JWT without any protection (PyJWT)

The mode is chosen once at construction. Decoding a token that fails
verification is a normal outcome and yields None.
"""

import asyncio
import json
import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional

import jwt
from cryptography.exceptions import InvalidTag
from jwcrypto import jwk
from jwcrypto.common import JWException
from jwcrypto.jwt import JWT

from src.models.session_state import SessionData
from src.core.exceptions import token_error

logger = logging.getLogger(__name__)

DATA_CLAIM = "data"

SIGNING_ALGORITHM = "HS256"
KEY_WRAP_ALGORITHM = "PBES2-HS512+A256KW"
CONTENT_ENCRYPTION_ALGORITHM = "A256GCM"
ENCRYPTED_HEADER = {"alg": KEY_WRAP_ALGORITHM, "enc": CONTENT_ENCRYPTION_ALGORITHM}

# jwcrypto raises ValueError/TypeError for malformed or unexpected token types
_JWE_ERRORS = (JWException, InvalidTag, ValueError, TypeError, KeyError)


class SecurityMode(str, Enum):
    ENCRYPTED = "encrypted"
    SIGNED = "signed"
    UNSECURED = "unsecured"

    @property
    def requires_secret(self) -> bool:
        return self is not SecurityMode.UNSECURED


def select_security_mode(encrypt: bool, sign: bool, secret: Optional[str]) -> SecurityMode:
    """
    Pick the security mode for a storage instance.

    Encryption wins over signing. Without a usable secret the result is
    always UNSECURED.
    """
    if secret:
        if encrypt:
            return SecurityMode.ENCRYPTED
        if sign:
            return SecurityMode.SIGNED
    return SecurityMode.UNSECURED


class TokenCodec:
    """Encode and decode session data as JWTs under a fixed mode and secret"""

    def __init__(self, mode: SecurityMode, secret: Optional[str] = None):
        if mode.requires_secret and not secret:
            raise ValueError(f"{mode.value} tokens need a secret")

        self.mode = mode
        self._secret = secret.encode("utf-8") if secret else None
        self._key = jwk.JWK.from_password(secret) if mode is SecurityMode.ENCRYPTED else None

    def _claims(self, data: SessionData, expires: Optional[datetime]) -> Dict[str, Any]:
        claims: Dict[str, Any] = {
            DATA_CLAIM: data,
            "iat": int(datetime.now(timezone.utc).timestamp()),
        }
        if expires is not None:
            # Naive datetimes are UTC, matching the cookie's Expires attribute
            if expires.tzinfo is None:
                expires = expires.replace(tzinfo=timezone.utc)
            claims["exp"] = int(expires.timestamp())
        return claims

    async def encode(self, data: SessionData, expires: Optional[datetime] = None) -> str:
        claims = self._claims(data, expires)

        if self.mode is SecurityMode.ENCRYPTED:
            return await asyncio.to_thread(self._encrypt, claims)
        if self.mode is SecurityMode.SIGNED:
            return jwt.encode(claims, self._secret, algorithm=SIGNING_ALGORITHM)
        return jwt.encode(claims, None, algorithm="none")

    async def decode(self, token: str) -> Optional[SessionData]:
        """
        Decode a token back into session data.

        Returns None when the token fails decryption, verification or
        expiry checks. In UNSECURED mode a token that cannot be parsed or
        whose header is not `alg: none` raises TokenDecodeError.
        """
        if self.mode is SecurityMode.ENCRYPTED:
            try:
                claims = await asyncio.to_thread(self._decrypt, token)
            except _JWE_ERRORS as e:
                logger.debug(f"Rejected encrypted token: {type(e).__name__}: {e}")
                return None
        elif self.mode is SecurityMode.SIGNED:
            try:
                claims = jwt.decode(token, self._secret, algorithms=[SIGNING_ALGORITHM])
            except jwt.PyJWTError as e:
                logger.debug(f"Rejected signed token: {type(e).__name__}: {e}")
                return None
        else:
            try:
                algorithm = jwt.get_unverified_header(token).get("alg")
                if algorithm != "none":
                    raise token_error(
                        f"Expected an unsecured token, got alg={algorithm!r}",
                        mode=self.mode.value
                    )
                claims = jwt.decode(
                    token,
                    options={"verify_signature": False, "verify_exp": True}
                )
            except jwt.ExpiredSignatureError:
                logger.debug("Rejected expired unsecured token")
                return None
            except jwt.PyJWTError as e:
                raise token_error(f"Malformed token: {e}", mode=self.mode.value) from e

        data = claims.get(DATA_CLAIM)
        if not isinstance(data, dict):
            logger.debug(f"Token without a '{DATA_CLAIM}' object claim")
            return None
        return data

    def _encrypt(self, claims: Dict[str, Any]) -> str:
        token = JWT(header=ENCRYPTED_HEADER, claims=claims)
        token.make_encrypted_token(self._key)
        return token.serialize()

    def _decrypt(self, token: str) -> Dict[str, Any]:
        decoded = JWT(
            algs=[KEY_WRAP_ALGORITHM, CONTENT_ENCRYPTION_ALGORITHM],
            expected_type="JWE"
        )
        decoded.leeway = 0
        decoded.deserialize(token, self._key)
        claims = json.loads(decoded.claims)
        if not isinstance(claims, dict):
            raise ValueError("JWE payload is not a claims object")
        return claims
