# src/core/exceptions.py
"""
Core exceptions for the JWT cookie session service.

Decode failures are expected (tampered or expired cookies) and are
recovered inside the storage adapter. Oversized cookies and broken
configuration are fatal and surface to the caller.
"""

from typing import Optional, Dict, Any


class SessionServiceError(Exception):
    """Base exception for all session service errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize base exception.

        Args:
            message: Human-readable error message
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class TokenDecodeError(SessionServiceError):
    """A token could not be parsed into session data"""

    def __init__(
        self,
        message: str,
        mode: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize token decode error.

        Args:
            message: Error description
            mode: Security mode the token was decoded under
            details: Additional decode context
        """
        super().__init__(message, details)
        self.mode = mode

        if mode:
            self.details['mode'] = mode


class CookieTooLargeError(SessionServiceError):
    """The serialized session cookie exceeds the browser limit"""

    def __init__(
        self,
        message: str,
        length: int,
        limit: int,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize cookie size error.

        Args:
            message: Error description
            length: Length of the serialized cookie
            limit: Maximum accepted length
            details: Additional cookie context
        """
        super().__init__(message, details)
        self.length = length
        self.limit = limit

        self.details['length'] = length
        self.details['limit'] = limit


class SessionConfigurationError(SessionServiceError):
    """Errors in session storage configuration"""

    def __init__(
        self,
        message: str,
        component: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize configuration error.

        Args:
            message: Error description
            component: Component with configuration issue
            details: Additional configuration context
        """
        super().__init__(message, details)
        self.component = component

        if component:
            self.details['component'] = component


# Convenience functions for creating common errors

def token_error(message: str, mode: str = None) -> TokenDecodeError:
    """Create a token decode error with mode context."""
    return TokenDecodeError(message, mode=mode)


def cookie_size_error(length: int, limit: int) -> CookieTooLargeError:
    """Create a cookie size error carrying the computed length."""
    return CookieTooLargeError(
        f"Cookie length will exceed browser maximum. Length: {length}",
        length=length,
        limit=limit
    )


def config_error(message: str, component: str) -> SessionConfigurationError:
    """Create a configuration error with component context."""
    return SessionConfigurationError(message, component=component)


ConfigurationError = SessionConfigurationError
