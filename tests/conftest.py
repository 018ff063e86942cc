"""Shared test fixtures for the photobooth test suite.

Provides common fixtures used across unit tests: synthetic frames,
faces, a scriptable face oracle and a mock capture source.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import datetime
from unittest.mock import AsyncMock

import numpy as np
import pytest

from photobooth.capture.base import CaptureSource
from photobooth.domain.models import CapturedFrame, Face
from photobooth.faces.base import FaceOracle, ModelLoadError


def make_face(confidence: float = 0.99, x: float = 10.0, y: float = 20.0) -> Face:
    """A 40x50 face box at (x, y) with five landmarks."""
    return Face(
        top_left=(x, y),
        bottom_right=(x + 40.0, y + 50.0),
        landmarks=((x + 12, y + 18), (x + 28, y + 18), (x + 20, y + 28), (x + 14, y + 38), (x + 26, y + 38)),
        confidence=confidence,
    )


def make_frame(image: np.ndarray, frame_number: int = 0) -> CapturedFrame:
    return CapturedFrame(
        image=image,
        timestamp=datetime(2025, 1, 1, 12, 0, 0),
        frame_number=frame_number,
        source_device="test",
    )


class StubOracle(FaceOracle):
    """Face oracle returning scripted results.

    Each ``estimate_faces`` call pops the next entry of ``results``
    (repeating the last one when exhausted). An entry that is an
    ``Exception`` is raised. ``load_error`` is raised from ``load`` in
    place of the usual model error. When ``gated`` is set, calls block
    until released so overlapping calls can be tested.
    """

    def __init__(
        self,
        results: list[list[Face] | Exception] | None = None,
        fail_load: bool = False,
        gated: bool = False,
        load_error: BaseException | None = None,
    ) -> None:
        super().__init__()
        self._results = list(results or [[]])
        self._fail_load = fail_load
        self._load_error = load_error
        self.calls = 0
        self.gates: list[asyncio.Event] = []
        self._gated = gated

    async def load(self) -> None:
        if self._load_error is not None:
            raise self._load_error
        if self._fail_load:
            raise ModelLoadError("stub model missing", model="stub")
        self._is_loaded = True

    async def estimate_faces(self, frame: CapturedFrame) -> list[Face]:
        index = min(self.calls, len(self._results) - 1)
        self.calls += 1
        if self._gated:
            gate = asyncio.Event()
            self.gates.append(gate)
            await gate.wait()
        result = self._results[index]
        if isinstance(result, Exception):
            raise result
        return list(result)


# ---------------------------------------------------------------------------
# Frame / Image Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def blank_image() -> np.ndarray:
    """A 120x160 mid-gray BGR image (6x8 motion cells at stride 20)."""
    return np.full((120, 160, 3), 128, dtype=np.uint8)


@pytest.fixture
def sample_frame(blank_image: np.ndarray) -> CapturedFrame:
    return make_frame(blank_image)


@pytest.fixture
def one_face() -> Face:
    return make_face()


# ---------------------------------------------------------------------------
# Mock Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def frame_factory() -> Callable[..., CapturedFrame]:
    return make_frame


@pytest.fixture
def face_factory() -> Callable[..., Face]:
    return make_face


@pytest.fixture
def stub_oracle_cls() -> type[StubOracle]:
    return StubOracle


@pytest.fixture
def mock_capture_source(sample_frame: CapturedFrame) -> AsyncMock:
    """A mock CaptureSource that always returns ``sample_frame``."""
    mock = AsyncMock(spec=CaptureSource)
    mock.is_open = True
    mock.capture_frame.return_value = sample_frame
    return mock
