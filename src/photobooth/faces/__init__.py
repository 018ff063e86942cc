"""Face sensing for photobooth.

Provides a model-agnostic face detector that throttles and filters the
output of an external inference oracle.

Public API:
    FaceOracle -- Abstract base class for face models
    ModelLoadError -- Raised when a model cannot be loaded
    FaceDetector -- Confidence filter and latest-result publisher
    filter_faces -- Confidence filter as a plain function
    YuNetFaceOracle -- OpenCV YuNet implementation
"""

from photobooth.faces.base import FaceOracle, ModelLoadError
from photobooth.faces.detector import FaceDetector, filter_faces

__all__ = [
    "FaceOracle",
    "ModelLoadError",
    "FaceDetector",
    "filter_faces",
    "YuNetFaceOracle",
]


def __getattr__(name: str) -> type:
    """Lazy import for concrete implementations that require external deps."""
    if name == "YuNetFaceOracle":
        from photobooth.faces.yunet import YuNetFaceOracle
        return YuNetFaceOracle
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
