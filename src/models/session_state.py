# src/models/session_state.py

from datetime import datetime
from typing import Any, Dict, List, Literal, Mapping, Optional, Union
from pydantic import BaseModel, Field

SessionData = Dict[str, Any]

FLASH_PREFIX = "__flash_"
FLASH_SUFFIX = "__"


def flash_key(name: str) -> str:
    return f"{FLASH_PREFIX}{name}{FLASH_SUFFIX}"


class Session(BaseModel):
    """
    Session data paired with an identifier.

    The identifier is derived from the cookie token and is not a stable
    session key. Values flashed with `flash()` are returned once by `get()`
    and removed afterwards.
    """
    id: str = ""
    data: SessionData = Field(default_factory=dict)

    def has(self, name: str) -> bool:
        return name in self.data or flash_key(name) in self.data

    def get(self, name: str, default: Any = None) -> Any:
        if name in self.data:
            return self.data[name]

        key = flash_key(name)
        if key in self.data:
            return self.data.pop(key)

        return default

    def set(self, name: str, value: Any) -> None:
        self.data[name] = value

    def flash(self, name: str, value: Any) -> None:
        self.data[flash_key(name)] = value

    def unset(self, name: str) -> None:
        self.data.pop(name, None)


def create_session(data: Optional[SessionData] = None, id: str = "") -> Session:
    """Create a session object around a copy of `data`"""
    return Session(id=id, data=dict(data or {}))


class CookieOptions(BaseModel):
    """
    Attributes of the session cookie.

    Only the first entry of `secrets` is used, for both issuing and
    verifying tokens.
    """
    name: str = "session"
    domain: Optional[str] = None
    path: str = "/"
    max_age: Optional[int] = None
    expires: Optional[datetime] = None
    secure: bool = False
    http_only: bool = False
    same_site: Optional[Literal["lax", "strict", "none"]] = None
    secrets: List[str] = Field(default_factory=list)

    @property
    def secret(self) -> Optional[str]:
        return self.secrets[0] if self.secrets else None

    def merged(self, overrides: Optional[Union["CookieOptions", Mapping[str, Any]]] = None) -> "CookieOptions":
        """
        Return a copy with call-site overrides applied.

        `name` and `secrets` always come from the configured options.
        """
        if overrides is None:
            return self.model_copy()

        if isinstance(overrides, CookieOptions):
            update = overrides.model_dump(exclude_unset=True)
        else:
            update = dict(overrides)

        update.pop("name", None)
        update.pop("secrets", None)

        return CookieOptions.model_validate({**self.model_dump(), **update})
