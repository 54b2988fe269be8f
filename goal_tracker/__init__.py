"""Goal Tracker app session: configuration, auth and wiring."""

from .app import AppSession, create_app_session
from .auth import (
    AuthClient,
    AuthError,
    AuthEvent,
    AuthSession,
    AuthStateChange,
    SupabaseAuthClient,
)
from .config import Config
from .profiles import Profile, ProfileService

__all__ = [
    "AppSession",
    "create_app_session",
    "AuthClient",
    "AuthError",
    "AuthEvent",
    "AuthSession",
    "AuthStateChange",
    "SupabaseAuthClient",
    "Config",
    "Profile",
    "ProfileService",
]
