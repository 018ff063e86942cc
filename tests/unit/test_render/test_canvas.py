"""Tests for the in-memory CanvasRenderSink."""

from __future__ import annotations

import numpy as np
import pytest

from photobooth.motion.detector import MotionDetector
from photobooth.render.base import RenderSink, RenderSinkMissing
from photobooth.render.canvas import CanvasRenderSink


@pytest.fixture
def sink() -> CanvasRenderSink:
    canvas = CanvasRenderSink()
    canvas.attach(160, 120)
    return canvas


class TestRenderSinkInterface:
    def test_cannot_instantiate_abstract_class(self) -> None:
        with pytest.raises(TypeError):
            RenderSink()  # type: ignore[abstract]


class TestCanvasAttach:
    def test_unattached_raises_missing(self, sample_frame) -> None:
        canvas = CanvasRenderSink()
        assert canvas.is_attached is False
        with pytest.raises(RenderSinkMissing):
            canvas.draw_faces(sample_frame, [])
        with pytest.raises(RenderSinkMissing):
            canvas.show_capture(sample_frame.image)

    def test_attach_blanks_photo(self, sink: CanvasRenderSink) -> None:
        assert sink.photo_canvas.shape == (120, 160, 3)
        assert int(sink.photo_canvas.max()) == 0

    def test_detach(self, sink: CanvasRenderSink, sample_frame) -> None:
        sink.detach()
        with pytest.raises(RenderSinkMissing):
            sink.draw_faces(sample_frame, [])


class TestCanvasDrawing:
    def test_faces_tint_box_blue(self, sink: CanvasRenderSink, sample_frame, one_face) -> None:
        sink.draw_faces(sample_frame, [one_face])
        inside = sink.face_canvas[40, 30].astype(int)
        outside = sink.face_canvas[110, 150].astype(int)
        assert outside.tolist() == [128, 128, 128]
        assert inside[0] > inside[2]  # BGR: more blue than red

    def test_landmarks_drawn_brighter(self, sink: CanvasRenderSink, sample_frame, one_face) -> None:
        sink.draw_faces(sample_frame, [one_face])
        lx, ly = (int(v) for v in one_face.landmarks[0])
        assert int(sink.face_canvas[ly, lx, 1]) > int(sink.face_canvas[45, 35, 1])

    def test_no_faces_copies_frame(self, sink: CanvasRenderSink, sample_frame) -> None:
        sink.draw_faces(sample_frame, [])
        np.testing.assert_array_equal(sink.face_canvas, sample_frame.image)

    def test_motion_tiles(self, sink: CanvasRenderSink, blank_image: np.ndarray) -> None:
        detector = MotionDetector()
        detector.sample(blank_image)
        changed = blank_image.copy()
        changed[20, 40] = (0, 0, 250)
        reading = detector.sample(changed)

        sink.draw_motion(reading)
        tile = sink.motion_canvas[20:40, 40:60]
        assert (tile == np.array([0, 0, 250], dtype=np.uint8)).all()
        assert (sink.motion_canvas[0:20, 0:20] == 255).all()

    def test_show_capture_resizes(self, sink: CanvasRenderSink) -> None:
        photo = np.full((240, 320, 3), 77, dtype=np.uint8)
        sink.show_capture(photo)
        assert sink.photo_canvas.shape == (120, 160, 3)
        assert int(sink.photo_canvas[60, 80, 0]) == 77


class TestCanvasScaling:
    def test_face_overlay_follows_canvas_size(self, sample_frame, one_face) -> None:
        sink = CanvasRenderSink()
        sink.attach(320, 240)  # twice the 160x120 frame
        sink.draw_faces(sample_frame, [one_face])

        inside = sink.face_canvas[130, 80].astype(int)  # frame (40, 65)
        assert inside[0] > inside[2]
        # Inside the unscaled box, outside the scaled one.
        assert sink.face_canvas[25, 15].tolist() == [128, 128, 128]

    def test_landmarks_follow_canvas_size(self, sample_frame, one_face) -> None:
        sink = CanvasRenderSink()
        sink.attach(320, 240)
        sink.draw_faces(sample_frame, [one_face])
        lx, ly = (int(v * 2) for v in one_face.landmarks[0])
        assert int(sink.face_canvas[ly, lx, 1]) > int(sink.face_canvas[100, 60, 1])
