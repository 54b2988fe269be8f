"""Camera capture session used by the complete-goal flow.

All configuration, start/stop and capture calls go through one asyncio lock,
so the backend only ever sees one operation at a time.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, Sequence

from capture.backend import CameraBackend, CameraPosition, PermissionStatus

logger = logging.getLogger(__name__)

MULTI_CAMERA_FALLBACK = "Multi-camera configuration incomplete; falling back to single camera."
NO_CAMERA_AVAILABLE = "Unable to add a camera input and photo output."


class CaptureError(Exception):
    """Base error for capture session failures."""


class CaptureConfigurationError(CaptureError):
    """No usable camera input/output pair could be configured."""


class CapturePermissionError(CaptureError):
    """Camera access was denied or is restricted."""


@dataclass(frozen=True)
class CapturedImage:
    """A single still produced by the capture session."""

    data: bytes
    position: CameraPosition
    captured_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class CaptureSession:
    """Serialized front/back camera session over a CameraBackend."""

    def __init__(self, backend: CameraBackend, *, allow_multi_camera: bool = True):
        self.backend = backend
        self.allow_multi_camera = allow_multi_camera

        self.is_configured = False
        self.configuration_error: Optional[str] = None
        self.configured_positions: tuple[CameraPosition, ...] = ()
        self.last_captured_image: Optional[CapturedImage] = None
        self.is_capturing = False

        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        return self.backend.is_running

    @property
    def is_multi_camera(self) -> bool:
        return len(self.configured_positions) > 1

    async def request_permission(self) -> bool:
        """Resolve whether camera capture is authorized, prompting if undecided."""
        status = self.backend.authorization_status()
        if status == PermissionStatus.AUTHORIZED:
            return True
        if status == PermissionStatus.NOT_DETERMINED:
            granted = await self.backend.request_access()
            logger.info(f"Camera access {'granted' if granted else 'denied'}")
            return granted
        logger.info(f"Camera access unavailable: {status.value}")
        return False

    def _attach(self, positions: Sequence[CameraPosition]) -> bool:
        for position in positions:
            if not self.backend.add_input(position):
                logger.debug(f"Could not add {position.value} camera input")
                return False
        for position in positions:
            if not self.backend.add_output(position):
                logger.debug(f"Could not add {position.value} photo output")
                return False
        return True

    async def configure(self) -> None:
        """
        Attach camera inputs and photo outputs.

        Tries front+back first when the backend supports multi-camera, then
        a single camera (back, then front). Safe to call again once
        configured.

        Raises:
            CaptureConfigurationError: If no camera could be attached
        """
        async with self._lock:
            if self.is_configured:
                return

            fallback_reason: Optional[str] = None
            configured: Optional[tuple[CameraPosition, ...]] = None

            if self.allow_multi_camera and self.backend.supports_multi_camera:
                pair = (CameraPosition.BACK, CameraPosition.FRONT)
                if self._attach(pair):
                    configured = pair
                else:
                    fallback_reason = MULTI_CAMERA_FALLBACK
                    self.backend.reset()

            if configured is None:
                for position in (CameraPosition.BACK, CameraPosition.FRONT):
                    if self._attach((position,)):
                        configured = (position,)
                        break
                    self.backend.reset()

            if configured is None:
                self.configuration_error = NO_CAMERA_AVAILABLE
                self.is_configured = False
                logger.warning(f"Capture configuration failed: {NO_CAMERA_AVAILABLE}")
                raise CaptureConfigurationError(NO_CAMERA_AVAILABLE)

            self.configured_positions = configured
            self.configuration_error = fallback_reason
            self.is_configured = True
            logger.info(
                f"Capture session configured with {', '.join(p.value for p in configured)} camera(s)"
            )

    async def start(self) -> None:
        async with self._lock:
            if not self.is_configured or self.backend.is_running:
                return
            self.backend.start_running()
            logger.info("Capture session started")

    async def stop(self) -> None:
        async with self._lock:
            if not self.backend.is_running:
                return
            self.backend.stop_running()
            logger.info("Capture session stopped")

    async def capture(self, position: Optional[CameraPosition] = None) -> CapturedImage:
        """
        Take a still from the configured cameras.

        Args:
            position: Camera to use; defaults to back, else front

        Returns:
            The captured image, also kept on ``last_captured_image``

        Raises:
            CaptureError: If the session is not configured, the requested
                camera is not configured, or the backend fails
        """
        async with self._lock:
            if not self.is_configured:
                raise CaptureError("Capture session is not configured")

            if position is None:
                position = (
                    CameraPosition.BACK
                    if CameraPosition.BACK in self.configured_positions
                    else self.configured_positions[0]
                )
            elif position not in self.configured_positions:
                raise CaptureError(f"The {position.value} camera is not configured")

            self.is_capturing = True
            try:
                data = await self.backend.capture_photo(position)
            except Exception as exc:
                logger.error(f"Photo capture failed on {position.value} camera: {exc}", exc_info=True)
                raise CaptureError(f"Photo capture failed: {exc}") from exc
            finally:
                self.is_capturing = False

            image = CapturedImage(data=data, position=position)
            self.last_captured_image = image
            return image
