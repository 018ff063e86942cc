"""Render sinks for photobooth.

Public API:
    RenderSink -- Abstract base class
    RenderSinkMissing -- Drawing target not ready
    CanvasRenderSink -- OpenCV drawing into in-memory canvases
"""

from photobooth.render.base import RenderSink, RenderSinkMissing

__all__ = ["RenderSink", "RenderSinkMissing", "CanvasRenderSink"]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "CanvasRenderSink":
        from photobooth.render.canvas import CanvasRenderSink
        return CanvasRenderSink
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
