"""Abstract base class for booth frame sources.

All capture implementations must conform to this interface, enabling
the pipeline to swap between a live webcam, a video file or synthetic
test frames without changing the rest of the system.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from photobooth.domain.models import CapturedFrame

logger = logging.getLogger(__name__)


class CaptureSource(ABC):
    """Abstract interface for reading the current camera frame.

    Implementations handle device initialization, frame acquisition and
    cleanup. Every loop of the pipeline asks for the current frame when
    it ticks, so ``capture_frame`` must be safe to await concurrently.

    Example usage::

        async with WebcamCapture(device_index=0) as source:
            frame = await source.capture_frame()
    """

    def __init__(self) -> None:
        self._frame_counter: int = 0
        self._is_open: bool = False

    @property
    def is_open(self) -> bool:
        """Whether the capture device is currently open and ready."""
        return self._is_open

    @abstractmethod
    async def open(self) -> None:
        """Open and initialize the capture device.

        Raises:
            CaptureError: If the device is missing or access is denied.
        """
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release the capture device. Safe to call multiple times."""
        ...

    @abstractmethod
    async def capture_frame(self) -> CapturedFrame:
        """Return the current frame from the source.

        Raises:
            CaptureError: If no frame can be read.
        """
        ...

    async def __aenter__(self) -> CaptureSource:
        """Async context manager entry -- opens the capture device."""
        await self.open()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        """Async context manager exit -- closes the capture device."""
        await self.close()


class CaptureError(Exception):
    """Raised when the camera is unavailable or a frame cannot be read."""
