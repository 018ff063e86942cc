"""Abstract base class for face detection models.

The booth treats the face model as an opaque inference oracle: it is
loaded once at startup and then asked for the faces in a frame. All
model implementations must conform to this interface so the detector
and pipeline never depend on a particular backend.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from photobooth.domain.models import CapturedFrame, Face

logger = logging.getLogger(__name__)


class FaceOracle(ABC):
    """Abstract interface for face detection inference."""

    def __init__(self) -> None:
        self._is_loaded = False

    @property
    def is_loaded(self) -> bool:
        """Whether :meth:`load` completed successfully."""
        return self._is_loaded

    @abstractmethod
    async def load(self) -> None:
        """Load the model weights.

        Raises:
            ModelLoadError: If the model cannot be loaded.
        """
        ...

    @abstractmethod
    async def estimate_faces(self, frame: CapturedFrame) -> list[Face]:
        """Return every face the model sees, unfiltered by confidence."""
        ...


class ModelLoadError(Exception):
    """Raised when the face detection model fails to load."""

    def __init__(self, message: str, model: str = "") -> None:
        super().__init__(message)
        self.model = model
