"""
Profile Service
Reads and updates the signed-in user's public profile row in Supabase.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from .auth import AuthClient, AuthError

logger = logging.getLogger(__name__)

_UNSET: Any = object()


@dataclass(frozen=True)
class Profile:
    """Public profile information for a user."""

    id: str
    username: str
    full_name: Optional[str] = None

    @classmethod
    def from_row(cls, row: Dict[str, Any]) -> "Profile":
        return cls(
            id=str(row.get("id", "")),
            username=row.get("username") or "",
            full_name=row.get("full_name"),
        )


class ProfileService:
    """Interface to the ``profiles`` table through the Supabase REST API."""

    def __init__(self, url: str, anon_key: str, auth_client: AuthClient, timeout: int = 10):
        """
        Initialize the profile service.

        Args:
            url: Supabase project URL
            anon_key: Project anon (publishable) key
            auth_client: Client holding the signed-in session
            timeout: Request timeout in seconds
        """
        self.url = url.rstrip("/")
        self.anon_key = anon_key
        self.auth_client = auth_client
        self.timeout = timeout

    def _headers(self) -> Dict[str, str]:
        session = self.auth_client.current_session
        if session is None:
            raise AuthError("Sign in to access your profile")
        return {
            "apikey": self.anon_key,
            "Authorization": f"Bearer {session.access_token}",
            "Content-Type": "application/json",
        }

    def _user_id(self) -> str:
        session = self.auth_client.current_session
        if session is None:
            raise AuthError("Sign in to access your profile")
        return session.user_id

    def _request(
        self,
        method: str,
        data: Optional[Dict[str, Any]] = None,
        extra_headers: Optional[Dict[str, str]] = None,
    ) -> Any:
        """
        Make an HTTP request against the caller's profile row.

        Raises:
            AuthError: When not signed in or on API error
        """
        headers = self._headers()
        if extra_headers:
            headers.update(extra_headers)

        url = f"{self.url}/rest/v1/profiles"
        params = {"id": f"eq.{self._user_id()}", "select": "id,username,full_name"}

        try:
            response = requests.request(
                method, url, headers=headers, params=params, json=data, timeout=self.timeout
            )
            response.raise_for_status()
            return response.json() if response.text else None
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            logger.error(f"Profile API error: {e}")
            raise AuthError(f"Profile request failed: {e}", status_code=status) from e
        except requests.RequestException as e:
            logger.error(f"Profile API error: {e}")
            raise AuthError(f"Profile request failed: {e}") from e

    @staticmethod
    def _first_row(payload: Any) -> Optional[Dict[str, Any]]:
        if isinstance(payload, list):
            return payload[0] if payload else None
        if isinstance(payload, dict):
            return payload
        return None

    def get_profile(self) -> Optional[Profile]:
        """Fetch the signed-in user's profile, or None if no row exists yet."""
        row = self._first_row(self._request("GET"))
        if row is None:
            logger.info("No profile row for the current user")
            return None
        return Profile.from_row(row)

    def update_profile(self, *, username: Any = _UNSET, full_name: Any = _UNSET) -> Profile:
        """
        Update the signed-in user's profile.

        Args:
            username: New username (trimmed, must not be empty)
            full_name: New full name; empty clears it

        Returns:
            The updated profile
        """
        changes: Dict[str, Any] = {}
        if username is not _UNSET:
            cleaned = str(username or "").strip()
            if not cleaned:
                raise ValueError("username must not be empty")
            changes["username"] = cleaned
        if full_name is not _UNSET:
            changes["full_name"] = (str(full_name).strip() or None) if full_name else None

        if not changes:
            current = self.get_profile()
            if current is None:
                raise AuthError("No profile to update")
            return current

        payload = self._request("PATCH", changes, {"Prefer": "return=representation"})
        row = self._first_row(payload)
        if row is None:
            raise AuthError("No profile to update")
        logger.info(f"Updated profile fields: {', '.join(sorted(changes))}")
        return Profile.from_row(row)
