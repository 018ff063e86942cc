"""Scene classification and status banner text."""

from __future__ import annotations

from collections.abc import Sequence

from photobooth.domain.models import Face, PipelineSnapshot, SceneState


def classify(motion_detected: bool, faces: Sequence[Face] | None, capturing: bool) -> SceneState:
    """Fuse the sensing signals into one scene state.

    First match wins: no motion, then an ongoing capture, then the face
    count. ``None`` faces count as zero.
    """
    if not motion_detected:
        return SceneState.NO_MOTION
    if capturing:
        return SceneState.SNAPPING
    count = len(faces) if faces else 0
    if count == 0:
        return SceneState.NO_FACE
    if count == 1:
        return SceneState.ONE_FACE
    return SceneState.MULTIPLE_FACES


def classify_snapshot(snapshot: PipelineSnapshot) -> SceneState:
    return classify(snapshot.motion_detected, snapshot.faces, snapshot.capturing)


def status_message(scene: SceneState, countdown: int = 0, steps: int = 3) -> str:
    """Banner text for the person in front of the booth."""
    if scene is SceneState.ONE_FACE:
        return f"One face - hold still...{steps - countdown}"
    return scene.value
