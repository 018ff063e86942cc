"""Face detection front-end for the booth pipeline.

Wraps a :class:`FaceOracle`, filters low-confidence faces and publishes
the latest accepted face list. Invocations may overlap: under
``OverlapPolicy.ALLOW`` every tick starts a new call even while earlier
ones are still running, and the newest-started call that completes
decides the published list. Under ``OverlapPolicy.DROP`` a tick is
skipped while any call is in flight.
"""

from __future__ import annotations

import asyncio
import logging

from photobooth.domain.models import CapturedFrame, Face, OverlapPolicy
from photobooth.faces.base import FaceOracle, ModelLoadError

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE_THRESHOLD = 0.95


def filter_faces(raw: list[Face], threshold: float = DEFAULT_CONFIDENCE_THRESHOLD) -> list[Face]:
    """Keep faces whose confidence is strictly above ``threshold``, in order."""
    return [face for face in raw if face.confidence > threshold]


class FaceDetector:
    """Owns the latest accepted face list."""

    def __init__(
        self,
        oracle: FaceOracle,
        confidence_threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
        overlap_policy: OverlapPolicy = OverlapPolicy.ALLOW,
    ) -> None:
        self._oracle = oracle
        self._threshold = confidence_threshold
        self._policy = overlap_policy
        self._faces: tuple[Face, ...] = ()
        self._in_flight = 0
        self._next_seq = 0
        self._published_seq = -1
        self._model_failed = False
        self._closed = False

    @property
    def faces(self) -> tuple[Face, ...]:
        """The latest accepted face list."""
        return self._faces

    @property
    def in_flight(self) -> int:
        return self._in_flight

    @property
    def overlap_policy(self) -> OverlapPolicy:
        return self._policy

    @property
    def model_failed(self) -> bool:
        return self._model_failed

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def load(self) -> bool:
        """Load the oracle once. Returns False if loading failed.

        A failed load leaves the detector in motion-only mode: every
        later :meth:`detect` reports zero faces without calling the model.
        """
        try:
            await self._oracle.load()
        except ModelLoadError as e:
            self._model_failed = True
            logger.error("Face model failed to load, detection disabled: %s", e)
            return False
        except Exception:
            self._model_failed = True
            logger.exception("Unexpected error loading face model, detection disabled")
            return False
        return True

    def close(self) -> None:
        """Stop publishing; results of calls still in flight are discarded."""
        self._closed = True

    def submit(self, frame: CapturedFrame) -> asyncio.Task | None:
        """Start an inference in the background, fire-and-forget.

        The in-flight slot is reserved before this returns, so the
        overlap policy holds even for calls that have not started yet.
        Returns None when the tick is skipped.
        """
        seq = self._reserve()
        if seq is None:
            return None
        return asyncio.create_task(self._infer(seq, frame))

    async def detect(self, frame: CapturedFrame) -> list[Face]:
        """Run one inference on ``frame`` and return the faces it accepted.

        If the call is skipped (DROP policy with a call in flight) or the
        model raises, the currently published list is returned unchanged.
        """
        if not self._closed and (self._model_failed or not self._oracle.is_loaded):
            return []
        seq = self._reserve()
        if seq is None:
            return list(self._faces)
        accepted = await self._infer(seq, frame)
        return list(self._faces) if accepted is None else accepted

    def _reserve(self) -> int | None:
        if self._closed or self._model_failed or not self._oracle.is_loaded:
            return None
        if self._policy is OverlapPolicy.DROP and self._in_flight > 0:
            logger.debug("Inference still running, skipping tick")
            return None
        seq = self._next_seq
        self._next_seq += 1
        self._in_flight += 1
        return seq

    async def _infer(self, seq: int, frame: CapturedFrame) -> list[Face] | None:
        try:
            raw = await self._oracle.estimate_faces(frame)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Face inference failed on frame %d: %s", frame.frame_number, e)
            return None
        finally:
            self._in_flight -= 1

        accepted = filter_faces(raw, self._threshold)
        self._publish(seq, accepted)
        return accepted

    def _publish(self, seq: int, accepted: list[Face]) -> None:
        if self._closed:
            logger.debug("Detector closed, discarding result %d", seq)
            return
        if seq < self._published_seq:
            logger.debug(
                "Discarding stale result %d (already published %d)",
                seq, self._published_seq,
            )
            return
        if len(accepted) != len(self._faces):
            logger.debug("Accepted faces: %d -> %d", len(self._faces), len(accepted))
        self._published_seq = seq
        self._faces = tuple(accepted)
