"""Face oracle backed by OpenCV's YuNet detector.

YuNet reports, per face, a bounding box, five landmarks (eyes, nose tip,
mouth corners) and a score, which maps directly onto :class:`Face`.
"""

from __future__ import annotations

import asyncio
import logging
import threading
from pathlib import Path

import cv2
import numpy as np

from photobooth.domain.models import CapturedFrame, Face
from photobooth.faces.base import FaceOracle, ModelLoadError

logger = logging.getLogger(__name__)

# Model-side cut-off only; acceptance is filtered in FaceDetector.
DEFAULT_SCORE_THRESHOLD = 0.5
DEFAULT_NMS_THRESHOLD = 0.3
DEFAULT_TOP_K = 50


class YuNetFaceOracle(FaceOracle):
    """Runs ``cv2.FaceDetectorYN`` in a thread pool executor.

    Overlapping calls may be scheduled, but the detector itself is only
    entered by one executor thread at a time.
    """

    def __init__(
        self,
        model_path: Path | str,
        score_threshold: float = DEFAULT_SCORE_THRESHOLD,
        nms_threshold: float = DEFAULT_NMS_THRESHOLD,
        top_k: int = DEFAULT_TOP_K,
    ) -> None:
        super().__init__()
        self._model_path = Path(model_path)
        self._score_threshold = score_threshold
        self._nms_threshold = nms_threshold
        self._top_k = top_k
        self._detector = None
        self._detect_lock = threading.Lock()

    async def load(self) -> None:
        """Create the YuNet detector from the ONNX model file."""
        if not self._model_path.exists():
            raise ModelLoadError(
                f"Face model not found: {self._model_path}",
                model=str(self._model_path),
            )
        loop = asyncio.get_running_loop()
        try:
            self._detector = await loop.run_in_executor(None, self._create_sync)
        except cv2.error as e:
            raise ModelLoadError(
                f"Failed to load face model {self._model_path}: {e}",
                model=str(self._model_path),
            ) from e
        self._is_loaded = True
        logger.info("Loaded YuNet face model from %s", self._model_path)

    def _create_sync(self):
        return cv2.FaceDetectorYN.create(
            str(self._model_path),
            "",
            (320, 320),
            self._score_threshold,
            self._nms_threshold,
            self._top_k,
        )

    async def estimate_faces(self, frame: CapturedFrame) -> list[Face]:
        if not self._is_loaded or self._detector is None:
            raise RuntimeError("Face model is not loaded. Call load() first.")
        loop = asyncio.get_running_loop()
        rows = await loop.run_in_executor(None, self._detect_sync, frame.image)
        return [self._to_face(row) for row in rows]

    def _detect_sync(self, image: np.ndarray) -> np.ndarray:
        """Synchronous inference (runs in thread pool)."""
        h, w = image.shape[:2]
        with self._detect_lock:
            self._detector.setInputSize((w, h))
            _, faces = self._detector.detect(image)
        if faces is None:
            return np.empty((0, 15), dtype=np.float32)
        return faces

    @staticmethod
    def _to_face(row: np.ndarray) -> Face:
        x, y, w, h = (float(v) for v in row[:4])
        landmarks = tuple(
            (float(row[i]), float(row[i + 1])) for i in range(4, 14, 2)
        )
        score = max(0.0, min(1.0, float(row[14])))
        return Face(
            top_left=(x, y),
            bottom_right=(x + w, y + h),
            landmarks=landmarks,
            confidence=score,
        )
