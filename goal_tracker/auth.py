"""Supabase authentication client.

The client is an explicit dependency: create one per app session, pass it to
whatever needs it, and close it when the session ends.
"""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Protocol

import requests

logger = logging.getLogger(__name__)


class AuthError(Exception):
    """Raised when the identity provider rejects or fails a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthEvent(str, Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"


@dataclass(frozen=True)
class AuthSession:
    """Tokens and identity for a signed-in user."""

    access_token: str
    refresh_token: str
    user_id: str
    email: Optional[str] = None
    token_type: str = "bearer"
    expires_at: Optional[int] = None

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> "AuthSession":
        user = data.get("user") or {}
        expires_at = data.get("expires_at")
        if expires_at is None and data.get("expires_in") is not None:
            expires_at = int(time.time()) + int(data["expires_in"])
        return cls(
            access_token=data["access_token"],
            refresh_token=data.get("refresh_token", ""),
            user_id=str(user.get("id", "")),
            email=user.get("email"),
            token_type=data.get("token_type", "bearer"),
            expires_at=int(expires_at) if expires_at is not None else None,
        )

    def is_expired(self, now: Optional[float] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now if now is not None else time.time()) >= self.expires_at


@dataclass(frozen=True)
class AuthStateChange:
    event: AuthEvent
    session: Optional[AuthSession]


AuthListener = Callable[[AuthStateChange], None]


class AuthClient(Protocol):
    """Protocol for the identity provider used by an app session."""

    @property
    def current_session(self) -> Optional[AuthSession]:
        ...

    def sign_in(self, email: str, password: str) -> AuthSession:
        ...

    def sign_up(self, email: str, password: str) -> Optional[AuthSession]:
        ...

    def sign_out(self) -> None:
        ...

    def refresh_session(self) -> AuthSession:
        ...

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        ...

    def close(self) -> None:
        ...


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or f"HTTP {response.status_code}"
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return f"HTTP {response.status_code}"


class SupabaseAuthClient:
    """Client for the Supabase GoTrue REST API"""

    def __init__(self, url: str, anon_key: str, timeout: int = 10):
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update(
            {
                "apikey": anon_key,
                "Content-Type": "application/json",
                "User-Agent": "goal-tracker/1.0",
            }
        )
        self._current: Optional[AuthSession] = None
        self._listeners: list[AuthListener] = []
        self._closed = False

    @classmethod
    def from_config(cls, config) -> "SupabaseAuthClient":
        return cls(config.supabase_url, config.supabase_anon_key, timeout=config.auth_timeout)

    @property
    def current_session(self) -> Optional[AuthSession]:
        return self._current

    def __enter__(self) -> "SupabaseAuthClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _post(
        self,
        path: str,
        payload: Optional[dict[str, Any]] = None,
        *,
        params: Optional[dict[str, str]] = None,
        access_token: Optional[str] = None,
    ) -> dict[str, Any]:
        if self._closed:
            raise AuthError("Auth client is closed")

        headers = {}
        if access_token:
            headers["Authorization"] = f"Bearer {access_token}"

        url = f"{self.url}/auth/v1/{path}"
        try:
            response = self.session.post(
                url,
                json=payload or {},
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Supabase auth request to {path} failed: {e}")
            raise AuthError(f"Auth request failed: {e}") from e

        if response.status_code >= 400:
            message = _error_message(response)
            logger.warning(f"Supabase auth {path} returned {response.status_code}: {message}")
            raise AuthError(message, status_code=response.status_code)

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise AuthError(f"Invalid auth response from {path}") from e

    @staticmethod
    def _deliver(listener: AuthListener, change: AuthStateChange) -> None:
        try:
            listener(change)
        except Exception as exc:
            logger.error(f"Auth listener failed on {change.event.value}: {exc}", exc_info=True)

    def _emit(self, event: AuthEvent) -> None:
        change = AuthStateChange(event=event, session=self._current)
        for listener in list(self._listeners):
            self._deliver(listener, change)

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """
        Subscribe to auth state changes.

        The callback is invoked right away with INITIAL_SESSION and the
        current session, then on every sign-in, sign-out and refresh.

        Returns:
            A function that removes the subscription
        """
        self._listeners.append(callback)
        self._deliver(callback, AuthStateChange(event=AuthEvent.INITIAL_SESSION, session=self._current))

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""
        data = self._post(
            "token",
            {"email": email.strip(), "password": password},
            params={"grant_type": "password"},
        )
        self._current = AuthSession.from_response(data)
        logger.info(f"Signed in as {self._current.email or self._current.user_id}")
        self._emit(AuthEvent.SIGNED_IN)
        return self._current

    def sign_up(self, email: str, password: str) -> Optional[AuthSession]:
        """
        Register a new account.

        Returns:
            The new session when the project auto-confirms emails, None when
            the user has to verify their email first
        """
        data = self._post("signup", {"email": email.strip(), "password": password})
        if not data.get("access_token"):
            logger.info(f"Sign-up for {email.strip()} pending email verification")
            return None
        self._current = AuthSession.from_response(data)
        self._emit(AuthEvent.SIGNED_IN)
        return self._current

    def refresh_session(self) -> AuthSession:
        if self._current is None or not self._current.refresh_token:
            raise AuthError("No session to refresh")
        data = self._post(
            "token",
            {"refresh_token": self._current.refresh_token},
            params={"grant_type": "refresh_token"},
        )
        self._current = AuthSession.from_response(data)
        logger.debug("Refreshed auth session")
        self._emit(AuthEvent.TOKEN_REFRESHED)
        return self._current

    def sign_out(self) -> None:
        """Sign out; the local session is cleared even if the server call fails."""
        if self._current is None:
            return
        token = self._current.access_token
        try:
            self._post("logout", access_token=token)
        except AuthError as e:
            logger.warning(f"Remote sign-out failed, clearing local session anyway: {e}")
        finally:
            self._current = None
        logger.info("Signed out")
        self._emit(AuthEvent.SIGNED_OUT)

    def close(self) -> None:
        """Close the HTTP session and drop all listeners"""
        if self._closed:
            return
        self._listeners.clear()
        self.session.close()
        self._closed = True
