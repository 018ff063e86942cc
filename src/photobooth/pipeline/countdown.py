"""Countdown state machine that turns a held single face into a capture."""

from __future__ import annotations

import logging

from photobooth.domain.models import CountdownOutcome, SceneState

logger = logging.getLogger(__name__)

DEFAULT_STEPS = 3


class CountdownController:
    """Counts ticks of sustained single-face hold.

    The counter lives in ``[0, steps - 1]``. Each tick with motion and a
    ``OneFace`` scene advances it; the tick that finds it at the final
    step commits a capture instead. Any other scene resets it. Without
    motion the controller is frozen: the counter keeps its value.

    Once a capture is committed the controller reports ``BUSY`` until
    :meth:`finish_capture` is called, so each cycle commits exactly one
    capture.
    """

    def __init__(self, steps: int = DEFAULT_STEPS) -> None:
        if steps < 1:
            raise ValueError(f"steps must be at least 1, got {steps}")
        self._steps = steps
        self._counter = 0
        self._capturing = False
        self._captures = 0

    @property
    def steps(self) -> int:
        return self._steps

    @property
    def counter(self) -> int:
        return self._counter

    @property
    def is_capturing(self) -> bool:
        return self._capturing

    @property
    def captures(self) -> int:
        """Number of captures committed so far."""
        return self._captures

    def tick(self, motion_detected: bool, scene: SceneState) -> CountdownOutcome:
        if self._capturing:
            return CountdownOutcome.BUSY
        if not motion_detected:
            return CountdownOutcome.FROZEN
        if scene is not SceneState.ONE_FACE:
            if self._counter:
                logger.debug("Countdown reset from %d (%s)", self._counter, scene.name)
            self._counter = 0
            return CountdownOutcome.RESET
        if self._counter < self._steps - 1:
            self._counter += 1
            logger.debug("Countdown advanced to %d/%d", self._counter, self._steps - 1)
            return CountdownOutcome.ADVANCED

        self._capturing = True
        self._captures += 1
        logger.info("Countdown complete, capture #%d committed", self._captures)
        return CountdownOutcome.CAPTURE

    def finish_capture(self) -> None:
        """End the settle period: counter back to 0, capturing cleared."""
        self._counter = 0
        self._capturing = False
