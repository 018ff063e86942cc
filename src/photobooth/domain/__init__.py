"""Domain models for photobooth.

This package contains all core data structures, enumerations, and value
objects used throughout the system. All models use Pydantic v2 for
validation.
"""

from photobooth.domain.models import (
    CapturedFrame,
    CountdownOutcome,
    CropRegion,
    Face,
    MotionReading,
    OverlapPolicy,
    PipelineSnapshot,
    SceneState,
)

__all__ = [
    "CapturedFrame",
    "CountdownOutcome",
    "CropRegion",
    "Face",
    "MotionReading",
    "OverlapPolicy",
    "PipelineSnapshot",
    "SceneState",
]
