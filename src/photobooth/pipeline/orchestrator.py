"""The booth pipeline that orchestrates sensing, scene state and capture.

Runs four independent fixed-interval loops on the event loop:

* faces     -- grab a frame, start an inference, draw the face overlay
* motion    -- grab a frame, sample the motion grid, draw the diff tiles
* countdown -- advance/reset the countdown, commit captures
* scene     -- re-derive the scene state from the latest signals

Components own their state (motion grid and flag, face list, countdown
and capturing flag); the pipeline only reads it through accessors, once
per tick, via :meth:`BoothPipeline.snapshot`.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from datetime import datetime

import numpy as np

from photobooth.capture.base import CaptureError, CaptureSource
from photobooth.config.settings import Settings
from photobooth.domain.models import (
    CountdownOutcome,
    MotionReading,
    PipelineSnapshot,
    SceneState,
)
from photobooth.faces.base import FaceOracle
from photobooth.faces.detector import FaceDetector
from photobooth.motion.detector import MotionDetector
from photobooth.pipeline.countdown import CountdownController
from photobooth.pipeline.scene import classify_snapshot, status_message
from photobooth.render.base import RenderSink, RenderSinkMissing

logger = logging.getLogger(__name__)


class CaptureBuffer:
    """Holds the most recently captured photo."""

    def __init__(self) -> None:
        self._image: np.ndarray | None = None
        self._count = 0
        self._captured_at: datetime | None = None
        self._frame_number: int | None = None

    @property
    def image(self) -> np.ndarray | None:
        return self._image

    @property
    def count(self) -> int:
        return self._count

    @property
    def captured_at(self) -> datetime | None:
        return self._captured_at

    @property
    def frame_number(self) -> int | None:
        return self._frame_number

    def store(self, image: np.ndarray, frame_number: int | None = None) -> None:
        self._image = image.copy()
        self._count += 1
        self._captured_at = datetime.now()
        self._frame_number = frame_number


class BoothPipeline:
    """Schedules the booth's sensing and countdown loops.

    Example usage::

        async with BoothPipeline(source, motion, faces, countdown) as booth:
            await asyncio.sleep(60)
            print(booth.capture_buffer.count)
    """

    def __init__(
        self,
        source: CaptureSource,
        motion: MotionDetector,
        faces: FaceDetector,
        countdown: CountdownController,
        sink: RenderSink | None = None,
        *,
        face_interval: float = 0.05,
        motion_interval: float = 0.1,
        countdown_interval: float = 1.0,
        scene_interval: float = 0.05,
        settle_delay: float = 1.0,
        suppress_faces_while_capturing: bool = True,
        drain_timeout: float = 2.0,
    ) -> None:
        self._source = source
        self._motion = motion
        self._faces = faces
        self._countdown = countdown
        self._sink = sink
        self._face_interval = face_interval
        self._motion_interval = motion_interval
        self._countdown_interval = countdown_interval
        self._scene_interval = scene_interval
        self._settle_delay = settle_delay
        self._suppress_faces = suppress_faces_while_capturing
        self._drain_timeout = drain_timeout

        self._scene = SceneState.LOADING
        self._ready = False
        self._running = False
        self._source_error: CaptureError | None = None
        self._capture_buffer = CaptureBuffer()
        self._tasks: list[asyncio.Task] = []
        self._inference_tasks: set[asyncio.Task] = set()
        self._settle_task: asyncio.Task | None = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_ready(self) -> bool:
        """Camera open and face model load attempted."""
        return self._ready

    @property
    def scene_state(self) -> SceneState:
        return self._scene

    @property
    def status_message(self) -> str:
        return status_message(self._scene, self._countdown.counter, self._countdown.steps)

    @property
    def source_error(self) -> CaptureError | None:
        """Why the camera could not be opened, if it could not."""
        return self._source_error

    @property
    def capture_buffer(self) -> CaptureBuffer:
        return self._capture_buffer

    @property
    def inference_tasks(self) -> frozenset[asyncio.Task]:
        return frozenset(self._inference_tasks)

    def snapshot(self) -> PipelineSnapshot:
        """Read every shared signal once, for a consistent tick."""
        return PipelineSnapshot(
            motion_detected=self._motion.motion_detected,
            faces=self._faces.faces,
            capturing=self._countdown.is_capturing,
            countdown=self._countdown.counter,
        )

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> bool:
        """Open the camera, load the face model and start the loops.

        Returns False if the camera is unavailable; the pipeline then
        stays in ``Loading`` until ``start()`` is called again.
        """
        if self._running:
            return True
        if self._faces.is_closed:
            raise RuntimeError("Pipeline has been stopped; build a new one to restart")

        self._source_error = None
        try:
            await self._source.open()
        except CaptureError as e:
            self._source_error = e
            logger.error("Camera unavailable, staying in %s: %s", SceneState.LOADING.name, e)
            return False

        try:
            loaded = await self._faces.load()
        except BaseException:
            await self._source.close()
            raise
        if not loaded:
            logger.warning("Continuing without face detection (motion only)")

        self._ready = True
        self._running = True
        self._tasks = [
            asyncio.create_task(self._run_every("faces", self._face_interval, self.face_tick)),
            asyncio.create_task(self._run_every("motion", self._motion_interval, self.motion_tick)),
            asyncio.create_task(self._run_every("countdown", self._countdown_interval, self.countdown_tick)),
            asyncio.create_task(self._run_every("scene", self._scene_interval, self.scene_tick)),
        ]
        logger.info("Booth pipeline started")
        return True

    async def stop(self) -> None:
        """Cancel every loop and release the camera. Safe to call twice."""
        self._running = False
        for task in self._tasks:
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        self._tasks = []
        # Cancelled loops may have scheduled a settle on their way out.
        if self._settle_task is not None:
            self._settle_task.cancel()
            await asyncio.gather(self._settle_task, return_exceptions=True)
            self._settle_task = None

        self._faces.close()
        if self._inference_tasks:
            logger.debug("Waiting for %d in-flight inference call(s)", len(self._inference_tasks))
            await asyncio.wait(set(self._inference_tasks), timeout=self._drain_timeout)

        if self._ready:
            await self._source.close()
            logger.info("Booth pipeline stopped")
        self._ready = False
        self._scene = SceneState.LOADING

    async def __aenter__(self) -> BoothPipeline:
        await self.start()
        return self

    async def __aexit__(self, exc_type: type | None, exc_val: Exception | None, exc_tb: object) -> None:
        await self.stop()

    async def _run_every(self, name: str, interval: float, tick: Callable[[], object]) -> None:
        while self._running:
            try:
                result = tick()
                if inspect.isawaitable(result):
                    await result
            except asyncio.CancelledError:
                raise
            except Exception:
                logger.exception("%s tick failed", name)
            await asyncio.sleep(interval)

    # ------------------------------------------------------------------
    # Ticks
    # ------------------------------------------------------------------

    async def face_tick(self) -> None:
        frame = await self._source.capture_frame()
        if not (self._suppress_faces and self._countdown.is_capturing):
            task = self._faces.submit(frame)
            if task is not None:
                self._inference_tasks.add(task)
                task.add_done_callback(self._inference_tasks.discard)
        if self._sink is not None:
            self._render(self._sink.draw_faces, frame, self._faces.faces)

    async def motion_tick(self) -> MotionReading:
        frame = await self._source.capture_frame()
        reading = self._motion.sample(frame)
        if self._sink is not None:
            self._render(self._sink.draw_motion, reading)
        return reading

    async def countdown_tick(self) -> CountdownOutcome:
        snapshot = self.snapshot()
        outcome = self._countdown.tick(snapshot.motion_detected, self._scene)
        if outcome is CountdownOutcome.CAPTURE:
            await self._commit_capture()
        return outcome

    def scene_tick(self) -> SceneState:
        if not self._ready:
            scene = SceneState.LOADING
        else:
            scene = classify_snapshot(self.snapshot())
        if scene is not self._scene:
            logger.info("Scene: %s -> %s", self._scene.name, scene.name)
            self._scene = scene
        return scene

    async def _commit_capture(self) -> None:
        self.scene_tick()
        try:
            frame = await self._source.capture_frame()
        except CaptureError as e:
            logger.error("Capture #%d failed: %s", self._countdown.captures, e)
        else:
            self._capture_buffer.store(frame.image, frame.frame_number)
            logger.info("Captured frame %d", frame.frame_number)
            if self._sink is not None:
                self._render(self._sink.show_capture, self._capture_buffer.image)
        finally:
            self._settle_task = asyncio.create_task(self._settle())

    async def _settle(self) -> None:
        await asyncio.sleep(self._settle_delay)
        self._countdown.finish_capture()
        self._motion.clear_motion()
        self._settle_task = None
        self.scene_tick()

    @staticmethod
    def _render(draw: Callable, *args: object) -> None:
        try:
            draw(*args)
        except RenderSinkMissing as e:
            logger.debug("Skipping draw: %s", e)


def build_pipeline(
    settings: Settings,
    source: CaptureSource,
    oracle: FaceOracle,
    sink: RenderSink | None = None,
) -> BoothPipeline:
    """Wire the booth components from settings."""
    motion = MotionDetector(
        sample_size=settings.motion.sample_size,
        diff_threshold=settings.motion.diff_threshold,
        fraction_threshold=settings.motion.fraction_threshold,
    )
    faces = FaceDetector(
        oracle,
        confidence_threshold=settings.faces.confidence_threshold,
        overlap_policy=settings.faces.overlap_policy,
    )
    countdown = CountdownController(steps=settings.countdown.steps)
    return BoothPipeline(
        source,
        motion,
        faces,
        countdown,
        sink,
        face_interval=settings.faces.interval,
        motion_interval=settings.motion.interval,
        countdown_interval=settings.countdown.interval,
        scene_interval=settings.scene.interval,
        settle_delay=settings.countdown.settle_delay,
        suppress_faces_while_capturing=settings.faces.suppress_while_capturing,
        drain_timeout=settings.faces.drain_timeout,
    )
