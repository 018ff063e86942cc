"""Abstract base class for render sinks.

A render sink consumes what the pipeline produces for the operator: the
accepted faces on every fast tick, the per-cell motion classification
on every motion tick, and the captured photo whenever a capture
commits. The pipeline never reads anything back from a sink.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from photobooth.domain.models import CapturedFrame, Face, MotionReading

logger = logging.getLogger(__name__)


class RenderSink(ABC):
    """Abstract interface for drawing the pipeline's outputs.

    Every method may raise :class:`RenderSinkMissing` when its drawing
    target is not ready; the pipeline skips that draw and carries on.
    """

    @abstractmethod
    def draw_faces(self, frame: CapturedFrame, faces: Sequence[Face]) -> None:
        """Draw the frame with an overlay for each accepted face."""
        ...

    @abstractmethod
    def draw_motion(self, reading: MotionReading) -> None:
        """Draw one tile per grid cell, colored when the cell moved."""
        ...

    @abstractmethod
    def show_capture(self, image: np.ndarray) -> None:
        """Display the newly captured photo."""
        ...


class RenderSinkMissing(Exception):
    """Raised when a drawing target is not ready yet."""
