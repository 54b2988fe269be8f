"""Camera capture for completing goals."""

from .backend import CameraBackend, CameraPosition, PermissionStatus, SimulatedCameraBackend
from .session import (
    CaptureConfigurationError,
    CapturedImage,
    CaptureError,
    CapturePermissionError,
    CaptureSession,
)

__all__ = [
    "CameraBackend",
    "CameraPosition",
    "PermissionStatus",
    "SimulatedCameraBackend",
    "CaptureSession",
    "CapturedImage",
    "CaptureError",
    "CaptureConfigurationError",
    "CapturePermissionError",
]
