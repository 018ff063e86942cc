"""Tests for the WebcamCapture implementation (OpenCV mocked)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from photobooth.capture.base import CaptureError
from photobooth.capture.webcam import WebcamCapture


def _fake_cap(frame: np.ndarray | None = None, opened: bool = True) -> MagicMock:
    cap = MagicMock()
    cap.isOpened.return_value = opened
    cap.get.return_value = 640
    cap.read.return_value = (frame is not None, frame)
    return cap


class TestWebcamCapture:
    def test_init_defaults(self) -> None:
        capture = WebcamCapture()
        assert capture._device_index == 0
        assert capture._snap_scale == 0.6
        assert capture._snap_size == (360, 270)
        assert capture.is_open is False

    @pytest.mark.asyncio
    async def test_open_failure_raises(self) -> None:
        with patch("photobooth.capture.webcam.cv2.VideoCapture", return_value=_fake_cap(opened=False)):
            capture = WebcamCapture(device_index=3)
            with pytest.raises(CaptureError, match="device 3"):
                await capture.open()
        assert capture.is_open is False

    @pytest.mark.asyncio
    async def test_capture_returns_snap_frame(self) -> None:
        raw = np.zeros((480, 640, 3), dtype=np.uint8)
        cap = _fake_cap(raw)
        with patch("photobooth.capture.webcam.cv2.VideoCapture", return_value=cap):
            capture = WebcamCapture(resolution=(640, 480))
            await capture.open()
            first = await capture.capture_frame()
            second = await capture.capture_frame()
            await capture.close()

        assert first.image.shape == (270, 360, 3)
        assert (first.frame_number, second.frame_number) == (1, 2)
        assert first.source_device == "webcam:0"
        cap.release.assert_called_once()
        assert capture.is_open is False

    @pytest.mark.asyncio
    async def test_read_failure_raises(self) -> None:
        with patch("photobooth.capture.webcam.cv2.VideoCapture", return_value=_fake_cap(None)):
            capture = WebcamCapture()
            await capture.open()
            with pytest.raises(CaptureError, match="read"):
                await capture.capture_frame()

    @pytest.mark.asyncio
    async def test_capture_when_closed(self) -> None:
        with pytest.raises(CaptureError, match="not open"):
            await WebcamCapture().capture_frame()
