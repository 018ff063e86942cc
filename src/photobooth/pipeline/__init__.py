"""Scene classification, countdown and orchestration for photobooth.

Public API:
    classify -- Fuse motion, faces and capturing flag into a SceneState
    status_message -- Banner text for a scene and countdown step
    CountdownController -- Hold-still countdown state machine
    BoothPipeline -- Schedules the sensing and countdown loops
    CaptureBuffer -- The most recently captured photo
    build_pipeline -- Wire a pipeline from Settings
"""

from photobooth.pipeline.countdown import CountdownController
from photobooth.pipeline.orchestrator import BoothPipeline, CaptureBuffer, build_pipeline
from photobooth.pipeline.scene import classify, status_message

__all__ = [
    "BoothPipeline",
    "CaptureBuffer",
    "CountdownController",
    "build_pipeline",
    "classify",
    "status_message",
]
