"""Core domain models for the photobooth system.

These models represent the data flowing through the booth pipeline:
frames from the camera, faces from the detection model, motion readings
from the sampling grid, and the discrete scene and countdown states that
drive the capture.
"""

from __future__ import annotations

import enum
from datetime import datetime

import numpy as np
from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class SceneState(str, enum.Enum):
    """Discrete classification of the booth's sensing conditions.

    Values are the status banner texts shown to the person in front of
    the booth. Exactly one holds at any instant.
    """

    LOADING = "Loading..."
    NO_MOTION = "No motion detected"
    NO_FACE = "No face - move into box..."
    ONE_FACE = ""  # Banner is filled in by the countdown
    MULTIPLE_FACES = "Multiple faces"
    SNAPPING = "SNAP!"


class CountdownOutcome(str, enum.Enum):
    """What a single countdown tick did."""

    FROZEN = "frozen"  # No motion, counter untouched
    RESET = "reset"  # Scene is not OneFace, counter back to 0
    ADVANCED = "advanced"  # One more hold step
    CAPTURE = "capture"  # Final step reached, capture committed
    BUSY = "busy"  # A capture is still settling


class OverlapPolicy(str, enum.Enum):
    """How face detection treats a tick while inference is still running."""

    ALLOW = "allow"  # Start another call, latest result wins
    DROP = "drop"  # Skip the tick until the running call completes


# ---------------------------------------------------------------------------
# Vision / Capture Models
# ---------------------------------------------------------------------------


class CropRegion(BaseModel):
    """Defines a rectangular crop region within a captured frame.

    Coordinates are in pixels, origin at top-left.
    """

    model_config = ConfigDict(frozen=True)

    x: int = Field(ge=0, description="Left edge x-coordinate in pixels")
    y: int = Field(ge=0, description="Top edge y-coordinate in pixels")
    width: int = Field(gt=0, description="Width of the crop region in pixels")
    height: int = Field(gt=0, description="Height of the crop region in pixels")


class CapturedFrame(BaseModel):
    """A single frame from the camera, read-only for the tick that uses it.

    Contains the raw image data as a numpy array along with metadata
    about when and how it was captured.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    image: np.ndarray = Field(description="Raw image data as BGR numpy array (OpenCV format)")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the frame was captured")
    frame_number: int = Field(ge=0, description="Sequential frame counter")
    source_device: str = Field(default="webcam", description="Identifier for the capture device")

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])


# ---------------------------------------------------------------------------
# Sensing Models
# ---------------------------------------------------------------------------


class Face(BaseModel):
    """One face reported by the detection model."""

    model_config = ConfigDict(frozen=True)

    top_left: tuple[float, float] = Field(description="Bounding box top-left (x, y)")
    bottom_right: tuple[float, float] = Field(description="Bounding box bottom-right (x, y)")
    landmarks: tuple[tuple[float, float], ...] = Field(
        default=(), description="Ordered facial landmark points (x, y)"
    )
    confidence: float = Field(ge=0.0, le=1.0, description="Detection probability (0-1)")

    @property
    def size(self) -> tuple[float, float]:
        return (
            self.bottom_right[0] - self.top_left[0],
            self.bottom_right[1] - self.top_left[1],
        )


class MotionReading(BaseModel):
    """Result of sampling one frame on the motion grid.

    ``colors`` holds the sampled BGR pixel of every grid cell and
    ``moved`` the per-cell classification, both laid out as
    ``(rows, cols)``. The render sink uses them to draw the diff tiles.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    stride: int = Field(gt=0)
    colors: np.ndarray = Field(description="Sampled BGR colors, shape (rows, cols, 3)")
    moved: np.ndarray = Field(description="Boolean moved mask, shape (rows, cols)")
    moved_cells: int = Field(ge=0)
    total_cells: int = Field(ge=0)
    motion_detected: bool

    @property
    def moved_fraction(self) -> float:
        if self.total_cells == 0:
            return 0.0
        return self.moved_cells / self.total_cells


class PipelineSnapshot(BaseModel):
    """Consistent view of the shared sensing state for one tick."""

    model_config = ConfigDict(frozen=True)

    motion_detected: bool
    faces: tuple[Face, ...] = ()
    capturing: bool = False
    countdown: int = Field(default=0, ge=0)
    timestamp: datetime = Field(default_factory=datetime.now)
