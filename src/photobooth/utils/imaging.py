"""Image processing utilities for photobooth.

Shared crop and resize helpers used by the capture source to turn the
raw camera image into the booth's "snap" frame.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np

from photobooth.domain.models import CropRegion

logger = logging.getLogger(__name__)


def center_crop_region(width: int, height: int, scale: float) -> CropRegion:
    """Return the centered region covering ``scale`` of each dimension."""
    if not 0 < scale <= 1:
        raise ValueError(f"scale must be in (0, 1], got {scale}")
    crop_w = max(1, round(width * scale))
    crop_h = max(1, round(height * scale))
    return CropRegion(
        x=(width - crop_w) // 2,
        y=(height - crop_h) // 2,
        width=crop_w,
        height=crop_h,
    )


def crop(image: np.ndarray, region: CropRegion) -> np.ndarray:
    """Apply a crop region to an image, returning a copy."""
    r = region
    return image[r.y : r.y + r.height, r.x : r.x + r.width].copy()


def fit_frame(image: np.ndarray, size: tuple[int, int]) -> np.ndarray:
    """Resize an image to exactly ``size`` (width, height).

    Downscaling uses area interpolation, upscaling linear.
    """
    w, h = size
    if image.shape[1] == w and image.shape[0] == h:
        return image
    shrinking = image.shape[1] > w or image.shape[0] > h
    interpolation = cv2.INTER_AREA if shrinking else cv2.INTER_LINEAR
    return cv2.resize(image, (w, h), interpolation=interpolation)


def snap_frame(image: np.ndarray, scale: float, size: tuple[int, int]) -> np.ndarray:
    """Center-crop ``scale`` of the camera image and fit it to ``size``."""
    region = center_crop_region(image.shape[1], image.shape[0], scale)
    return fit_frame(crop(image, region), size)
