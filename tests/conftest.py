# tests/conftest.py
"""
Shared fixtures for session storage tests.

Provides cookie options and a session storage for each security mode.
"""

import pytest

from src.models.session_state import CookieOptions
from src.core.security import create_jwt_session_storage
from tests.helpers import SECRET


@pytest.fixture
def cookie_options():
    return CookieOptions(name="session", secrets=[SECRET])


@pytest.fixture
def signed_storage(cookie_options):
    return create_jwt_session_storage(cookie_options, sign=True)


@pytest.fixture
def encrypted_storage(cookie_options):
    return create_jwt_session_storage(cookie_options, encrypt=True)


@pytest.fixture
def unsecured_storage():
    return create_jwt_session_storage(CookieOptions(name="session"))


@pytest.fixture(params=["encrypted", "signed", "unsecured"])
def storage(request, signed_storage, encrypted_storage, unsecured_storage):
    """Session storage in each security mode"""
    return {
        "encrypted": encrypted_storage,
        "signed": signed_storage,
        "unsecured": unsecured_storage,
    }[request.param]


@pytest.fixture
def sample_data():
    return {
        "uid": 42,
        "name": "Zoë",
        "roles": ["admin", "editor"],
        "prefs": {"theme": "dark", "notifications": False},
        "last_seen": None,
    }
