"""Frame capture module for photobooth.

Provides the booth's view of the camera: the current frame, center
cropped and resized to the snap dimensions. The abstract base class
allows alternative sources (e.g. video files, synthetic test frames).

Public API:
    CaptureSource -- Abstract base class
    CaptureError -- Camera missing, access denied or read failure
    WebcamCapture -- OpenCV webcam implementation
"""

from photobooth.capture.base import CaptureSource, CaptureError

__all__ = ["CaptureSource", "CaptureError", "WebcamCapture"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "WebcamCapture":
        from photobooth.capture.webcam import WebcamCapture
        return WebcamCapture
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
