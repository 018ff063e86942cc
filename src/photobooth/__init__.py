"""photobooth -- Unattended photo-booth kiosk core.

This package implements the real-time sensing and state-orchestration
pipeline of a self-service photo booth: it watches a live camera feed,
waits for exactly one still face in frame, counts down and captures a
still image automatically. Camera, face model and rendering are plugged
in as collaborators so the core runs headless and under test.
"""

__version__ = "0.1.0"
