"""Grid-sampled motion detection.

Samples a sparse grid of pixels from successive frames, packs each
sample into a color fingerprint and flags a tick as moving when enough
cells changed since the previous tick.
"""

from __future__ import annotations

import logging

import numpy as np

from photobooth.domain.models import CapturedFrame, MotionReading

logger = logging.getLogger(__name__)

SIGNIFICANT_BIT = 1_000_000
DEFAULT_SAMPLE_SIZE = 20
DEFAULT_DIFF_THRESHOLD = SIGNIFICANT_BIT * 100
DEFAULT_FRACTION_THRESHOLD = 0.01


def fingerprint(red: int, green: int, blue: int) -> int:
    """Pack one pixel's channels into a single ordered integer.

    Works elementwise on int64 channel arrays as well.
    """
    return red * SIGNIFICANT_BIT + green * 1_000 + blue


class MotionDetector:
    """Rolling one-frame diff over a regular sampling grid.

    The detector owns the previous-sample grid and the latched
    recent-motion flag. The flag is raised by any tick that detects
    motion and stays up until :meth:`clear_motion` is called; ticks
    without motion never lower it.
    """

    def __init__(
        self,
        sample_size: int = DEFAULT_SAMPLE_SIZE,
        diff_threshold: int = DEFAULT_DIFF_THRESHOLD,
        fraction_threshold: float = DEFAULT_FRACTION_THRESHOLD,
    ) -> None:
        if sample_size <= 0:
            raise ValueError(f"sample_size must be positive, got {sample_size}")
        self._sample_size = sample_size
        self._diff_threshold = diff_threshold
        self._fraction_threshold = fraction_threshold
        self._grid: np.ndarray | None = None
        self._seen: np.ndarray | None = None
        self._recent_motion = False

    @property
    def sample_size(self) -> int:
        return self._sample_size

    @property
    def motion_detected(self) -> bool:
        """Latched flag: motion seen since the last :meth:`clear_motion`."""
        return self._recent_motion

    def clear_motion(self) -> None:
        if self._recent_motion:
            logger.debug("Recent motion flag cleared")
        self._recent_motion = False

    def fingerprint_at(self, row: int, col: int) -> int | None:
        """Stored fingerprint for a grid cell, or None if never observed."""
        if self._grid is None or self._seen is None:
            return None
        rows, cols = self._grid.shape
        if not (0 <= row < rows and 0 <= col < cols):
            return None
        if not self._seen[row, col]:
            return None
        return int(self._grid[row, col])

    def sample(self, frame: CapturedFrame | np.ndarray) -> MotionReading:
        """Compare the frame's grid samples against the previous tick.

        Cells that were never observed before do not count as moved.
        Every cell's stored fingerprint is overwritten with this tick's
        value whether or not it moved.
        """
        image = frame.image if isinstance(frame, CapturedFrame) else frame
        if image.ndim != 3 or image.shape[2] < 3:
            raise ValueError(f"Expected a BGR color image, got shape {image.shape}")

        s = self._sample_size
        colors = image[::s, ::s, :3].copy()
        blue = colors[..., 0].astype(np.int64)
        green = colors[..., 1].astype(np.int64)
        red = colors[..., 2].astype(np.int64)
        current = fingerprint(red, green, blue)

        if self._grid is None or self._grid.shape != current.shape:
            if self._grid is not None:
                logger.info(
                    "Frame geometry changed (%s -> %s), motion grid reset",
                    self._grid.shape, current.shape,
                )
            self._grid = np.zeros(current.shape, dtype=np.int64)
            self._seen = np.zeros(current.shape, dtype=bool)

        moved = self._seen & (np.abs(current - self._grid) > self._diff_threshold)
        self._grid[...] = current
        self._seen[...] = True

        total = int(current.size)
        moved_cells = int(np.count_nonzero(moved))
        detected = total > 0 and moved_cells / total > self._fraction_threshold
        if detected:
            if not self._recent_motion:
                logger.debug(
                    "Motion detected: %d/%d cells moved", moved_cells, total,
                )
            self._recent_motion = True

        return MotionReading(
            stride=s,
            colors=colors,
            moved=moved,
            moved_cells=moved_cells,
            total_cells=total,
            motion_detected=detected,
        )
