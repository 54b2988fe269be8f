"""Camera backend protocol and an in-process simulated backend.

A backend wraps the platform camera stack: permission state, device inputs,
photo outputs and the running pipeline. CaptureSession drives a backend and
owns the sequencing; backends stay dumb.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Optional, Protocol

logger = logging.getLogger(__name__)


class CameraPosition(str, Enum):
    FRONT = "front"
    BACK = "back"


class PermissionStatus(str, Enum):
    AUTHORIZED = "authorized"
    NOT_DETERMINED = "not_determined"
    DENIED = "denied"
    RESTRICTED = "restricted"


class CameraBackend(Protocol):
    """Protocol for platform camera backends."""

    @property
    def supports_multi_camera(self) -> bool:
        """Whether front and back cameras can stream at the same time."""
        ...

    @property
    def is_running(self) -> bool:
        ...

    def authorization_status(self) -> PermissionStatus:
        ...

    async def request_access(self) -> bool:
        """Prompt for camera access; resolves to whether it was granted."""
        ...

    def add_input(self, position: CameraPosition) -> bool:
        """Attach the camera at ``position``; False if missing or not addable."""
        ...

    def add_output(self, position: CameraPosition) -> bool:
        """Attach a photo output fed by ``position``; False if not addable."""
        ...

    def reset(self) -> None:
        """Detach every input and output."""
        ...

    def start_running(self) -> None:
        ...

    def stop_running(self) -> None:
        ...

    async def capture_photo(self, position: CameraPosition) -> bytes:
        """Take one still from the output fed by ``position``."""
        ...


class SimulatedCameraBackend:
    """Deterministic camera backend for development machines and tests."""

    def __init__(
        self,
        positions: Iterable[CameraPosition] = (CameraPosition.BACK, CameraPosition.FRONT),
        *,
        multi_camera: bool = True,
        permission: PermissionStatus = PermissionStatus.AUTHORIZED,
        grant_on_request: bool = True,
        max_outputs: Optional[int] = None,
    ):
        """
        Args:
            positions: Cameras present on the simulated device
            multi_camera: Whether both cameras may be attached at once
            permission: Initial authorization status
            grant_on_request: Answer given when access is requested
            max_outputs: Cap on attachable photo outputs (None for no cap)
        """
        self.positions = set(positions)
        self.multi_camera = multi_camera
        self.permission = permission
        self.grant_on_request = grant_on_request
        self.max_outputs = max_outputs

        self.inputs: list[CameraPosition] = []
        self.outputs: list[CameraPosition] = []
        self.access_requests = 0
        self.start_calls = 0
        self.stop_calls = 0
        self.photos_taken = 0
        self._running = False

    @property
    def supports_multi_camera(self) -> bool:
        return self.multi_camera

    @property
    def is_running(self) -> bool:
        return self._running

    def authorization_status(self) -> PermissionStatus:
        return self.permission

    async def request_access(self) -> bool:
        self.access_requests += 1
        self.permission = (
            PermissionStatus.AUTHORIZED if self.grant_on_request else PermissionStatus.DENIED
        )
        return self.grant_on_request

    def add_input(self, position: CameraPosition) -> bool:
        if position not in self.positions or position in self.inputs:
            return False
        if self.inputs and not self.multi_camera:
            return False
        self.inputs.append(position)
        return True

    def add_output(self, position: CameraPosition) -> bool:
        if position not in self.inputs:
            return False
        if self.max_outputs is not None and len(self.outputs) >= self.max_outputs:
            return False
        self.outputs.append(position)
        return True

    def reset(self) -> None:
        self.inputs.clear()
        self.outputs.clear()

    def start_running(self) -> None:
        self.start_calls += 1
        self._running = True

    def stop_running(self) -> None:
        self.stop_calls += 1
        self._running = False

    async def capture_photo(self, position: CameraPosition) -> bytes:
        if position not in self.outputs:
            raise RuntimeError(f"No photo output attached for {position.value} camera")
        self.photos_taken += 1
        logger.debug(f"Simulated {position.value} photo #{self.photos_taken}")
        return f"simulated-{position.value}-{self.photos_taken}".encode("utf-8")
