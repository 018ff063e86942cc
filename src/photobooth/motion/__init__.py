"""Motion sensing for photobooth.

Public API:
    MotionDetector -- Grid-sampled rolling frame diff with latched flag
    fingerprint -- Pack a pixel's RGB channels into one integer
"""

from photobooth.motion.detector import MotionDetector, fingerprint

__all__ = ["MotionDetector", "fingerprint"]
