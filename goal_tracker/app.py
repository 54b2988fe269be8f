"""App session: wires auth, goal screens and capture together.

A session owns the lifetime of its collaborators. Open it once when the app
starts, close it on shutdown; everything it creates is handed out explicitly.
"""
from __future__ import annotations

import logging
from typing import Callable, Optional

from capture import CameraBackend, CapturedImage, CapturePermissionError, CaptureSession
from goals import GoalStore, load_seed_goals

from .auth import AuthClient, AuthEvent, AuthStateChange, SupabaseAuthClient
from .config import Config

logger = logging.getLogger(__name__)

_SESSION_EVENTS = {AuthEvent.INITIAL_SESSION, AuthEvent.SIGNED_IN, AuthEvent.SIGNED_OUT}


class AppSession:
    """One running instance of the goal tracker."""

    def __init__(
        self,
        config: Config,
        auth_client: AuthClient,
        capture_session: Optional[CaptureSession] = None,
    ):
        self.config = config
        self.auth_client = auth_client
        self.capture_session = capture_session
        self.is_authenticated = False
        self._unsubscribe: Optional[Callable[[], None]] = None

    def __enter__(self) -> "AppSession":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        if self._unsubscribe is not None:
            return
        self._unsubscribe = self.auth_client.on_auth_state_change(self._on_auth_change)
        logger.info("App session opened")

    def close(self) -> None:
        """Tear down: drop the auth subscription and close the auth client.

        The capture session is not stopped here because stopping is async;
        use ``aclose`` from async code to stop it as well.
        """
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.auth_client.close()
        self.is_authenticated = False
        logger.info("App session closed")

    async def aclose(self) -> None:
        if self.capture_session is not None:
            await self.capture_session.stop()
        self.close()

    def _on_auth_change(self, change: AuthStateChange) -> None:
        if change.event in _SESSION_EVENTS:
            self.is_authenticated = change.session is not None
            logger.debug(f"Auth event {change.event.value}: authenticated={self.is_authenticated}")

    def open_goals_screen(self) -> GoalStore:
        """Create the store backing a newly shown goals screen."""
        if not self.is_authenticated:
            raise PermissionError("Sign in to view goals")
        return GoalStore(load_seed_goals(self.config.goals_seed_file))

    async def complete_goal(self, store: GoalStore, goal_id: str) -> Optional[CapturedImage]:
        """
        Photograph proof for a goal and mark it completed.

        Args:
            store: Store holding the goal
            goal_id: Goal to complete

        Returns:
            The captured image, or None if the goal is no longer in the store

        Raises:
            CapturePermissionError: If camera access is denied
            CaptureError: If configuration or capture fails
        """
        if goal_id not in store:
            return None
        if self.capture_session is None:
            raise RuntimeError("No capture session configured for this app session")

        camera = self.capture_session
        if not await camera.request_permission():
            raise CapturePermissionError("Camera access is required to complete a goal")

        await camera.configure()
        await camera.start()
        try:
            image = await camera.capture()
        finally:
            await camera.stop()

        store.set_completed(goal_id, True)
        logger.info(f"Completed goal {goal_id} with {image.position.value} camera photo")
        return image


def create_app_session(
    config: Config, camera_backend: Optional[CameraBackend] = None
) -> AppSession:
    """Build an app session with a Supabase auth client and optional camera."""
    capture_session = None
    if camera_backend is not None:
        capture_session = CaptureSession(
            camera_backend, allow_multi_camera=config.enable_multi_camera
        )
    return AppSession(config, SupabaseAuthClient.from_config(config), capture_session)
