"""In-memory canvas render sink using OpenCV drawing primitives.

Keeps three BGR canvases -- face sensor, motion sensor and current
photo -- that a UI layer can blit or encode as it likes.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import cv2
import numpy as np

from photobooth.domain.models import CapturedFrame, Face, MotionReading
from photobooth.render.base import RenderSink, RenderSinkMissing
from photobooth.utils.imaging import fit_frame

logger = logging.getLogger(__name__)

FACE_FILL_COLOR = (255, 0, 0)  # BGR blue
FACE_FILL_ALPHA = 0.2
LANDMARK_COLOR = (255, 255, 255)
LANDMARK_ALPHA = 0.5
LANDMARK_RADIUS = 2
UNMOVED_COLOR = 255


class CanvasRenderSink(RenderSink):
    """Draws into numpy canvases that exist only after :meth:`attach`."""

    def __init__(self) -> None:
        self._size: tuple[int, int] | None = None
        self._face_canvas: np.ndarray | None = None
        self._motion_canvas: np.ndarray | None = None
        self._photo_canvas: np.ndarray | None = None

    @property
    def is_attached(self) -> bool:
        return self._size is not None

    @property
    def face_canvas(self) -> np.ndarray | None:
        return self._face_canvas

    @property
    def motion_canvas(self) -> np.ndarray | None:
        return self._motion_canvas

    @property
    def photo_canvas(self) -> np.ndarray | None:
        return self._photo_canvas

    def attach(self, width: int, height: int) -> None:
        """Allocate the canvases; the photo canvas starts out black."""
        self._size = (width, height)
        self._face_canvas = np.zeros((height, width, 3), dtype=np.uint8)
        self._motion_canvas = np.zeros((height, width, 3), dtype=np.uint8)
        self._photo_canvas = np.zeros((height, width, 3), dtype=np.uint8)
        logger.info("Render canvases attached (%dx%d)", width, height)

    def detach(self) -> None:
        self._size = None
        self._face_canvas = None
        self._motion_canvas = None
        self._photo_canvas = None

    def _require(self, canvas: np.ndarray | None, name: str) -> np.ndarray:
        if canvas is None or self._size is None:
            raise RenderSinkMissing(f"{name} canvas is not attached")
        return canvas

    def draw_faces(self, frame: CapturedFrame, faces: Sequence[Face]) -> None:
        canvas = self._require(self._face_canvas, "Face sensor")
        canvas[...] = fit_frame(frame.image, self._size)
        if not faces:
            return

        # Face coordinates are in frame pixels.
        sx = self._size[0] / frame.width
        sy = self._size[1] / frame.height

        def to_canvas(point: tuple[float, float]) -> tuple[int, int]:
            return int(round(point[0] * sx)), int(round(point[1] * sy))

        boxes = canvas.copy()
        for face in faces:
            x0, y0 = to_canvas(face.top_left)
            x1, y1 = to_canvas(face.bottom_right)
            cv2.rectangle(boxes, (x0, y0), (x1, y1), FACE_FILL_COLOR, thickness=-1)
        cv2.addWeighted(boxes, FACE_FILL_ALPHA, canvas, 1 - FACE_FILL_ALPHA, 0, dst=canvas)

        dots = canvas.copy()
        for face in faces:
            for point in face.landmarks:
                cv2.circle(dots, to_canvas(point), LANDMARK_RADIUS, LANDMARK_COLOR, thickness=-1)
        cv2.addWeighted(dots, LANDMARK_ALPHA, canvas, 1 - LANDMARK_ALPHA, 0, dst=canvas)

    def draw_motion(self, reading: MotionReading) -> None:
        canvas = self._require(self._motion_canvas, "Motion sensor")
        s = reading.stride
        tiles = np.where(reading.moved[..., None], reading.colors, UNMOVED_COLOR).astype(np.uint8)
        tiles = np.repeat(np.repeat(tiles, s, axis=0), s, axis=1)
        h = min(canvas.shape[0], tiles.shape[0])
        w = min(canvas.shape[1], tiles.shape[1])
        canvas[:h, :w] = tiles[:h, :w]

    def show_capture(self, image: np.ndarray) -> None:
        canvas = self._require(self._photo_canvas, "Photo")
        canvas[...] = fit_frame(image, self._size)
