"""Webcam capture implementation using OpenCV.

Reads frames from a local webcam device and turns each into the booth's
snap frame: a centered crop of the camera image resized to the snap
dimensions.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

import cv2
import numpy as np

from photobooth.capture.base import CaptureError, CaptureSource
from photobooth.domain.models import CapturedFrame
from photobooth.utils.imaging import snap_frame

logger = logging.getLogger(__name__)


class WebcamCapture(CaptureSource):
    """Captures frames from a webcam using OpenCV.

    Runs OpenCV's blocking capture in a thread pool executor to avoid
    blocking the async event loop. Device reads are serialized with a
    lock since several loops request frames at the same time.
    """

    def __init__(
        self,
        device_index: int = 0,
        snap_scale: float = 0.6,
        snap_size: tuple[int, int] = (360, 270),
        resolution: tuple[int, int] | None = None,
    ) -> None:
        super().__init__()
        self._device_index = device_index
        self._snap_scale = snap_scale
        self._snap_size = snap_size
        self._resolution = resolution
        self._cap: cv2.VideoCapture | None = None
        self._read_lock = asyncio.Lock()

    async def open(self) -> None:
        """Open the webcam device."""
        loop = asyncio.get_running_loop()
        self._cap = await loop.run_in_executor(
            None, cv2.VideoCapture, self._device_index
        )
        if not self._cap.isOpened():
            self._cap = None
            raise CaptureError(
                f"Failed to open webcam device {self._device_index}"
            )
        if self._resolution:
            w, h = self._resolution
            self._cap.set(cv2.CAP_PROP_FRAME_WIDTH, w)
            self._cap.set(cv2.CAP_PROP_FRAME_HEIGHT, h)
        self._is_open = True
        actual_w = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        actual_h = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        logger.info(
            "Opened webcam device %d (%dx%d, snap %dx%d)",
            self._device_index, actual_w, actual_h, *self._snap_size,
        )

    async def close(self) -> None:
        """Release the webcam device."""
        if self._cap is not None and self._cap.isOpened():
            self._cap.release()
            logger.info("Released webcam device %d", self._device_index)
        self._cap = None
        self._is_open = False

    async def capture_frame(self) -> CapturedFrame:
        """Capture the current frame from the webcam as a snap frame."""
        if not self._is_open or self._cap is None:
            raise CaptureError("Webcam is not open")
        loop = asyncio.get_running_loop()
        async with self._read_lock:
            raw = await loop.run_in_executor(None, self._capture_sync)
        image = snap_frame(raw, self._snap_scale, self._snap_size)
        self._frame_counter += 1
        return CapturedFrame(
            image=image,
            timestamp=datetime.now(),
            frame_number=self._frame_counter,
            source_device=f"webcam:{self._device_index}",
        )

    def _capture_sync(self) -> np.ndarray:
        """Synchronous frame capture (runs in thread pool)."""
        ret, frame = self._cap.read()
        if not ret or frame is None:
            raise CaptureError("Failed to read frame from webcam")
        return frame
