"""
Colour Grading Pipeline
=======================

Per-pixel brightness, contrast and saturation adjustment.

Stages (fixed order, each clamped to [0, 255] after truncation):
    1. Brightness:  v' = v * bf
    2. Contrast:    v' = cf * (v - 128) + 128
    3. Saturation:  P  = sqrt(0.299 r² + 0.587 g² + 0.114 b²)
                    v' = P + (v - P) * sf

A stage whose factor is exactly 1 is skipped. Brightness and contrast act
on each channel independently; saturation couples the three channels
through the per-pixel pivot P.

Reference:
    http://alienryderflex.com/saturation.html
"""

import logging

import numpy as np

from rle_player.models.frame import Frame
from rle_player.models.grading import ColorGradingParams


logger = logging.getLogger(__name__)


LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)
CONTRAST_PIVOT = 128.0


def _clamp(values: np.ndarray) -> np.ndarray:
    return np.clip(np.trunc(values), 0.0, 255.0)


def apply_grading(pixels: np.ndarray, params: ColorGradingParams) -> np.ndarray:
    """
    Grade an (..., 3) uint8 RGB buffer in place.

    Args:
        pixels: Writable uint8 array whose last axis is (r, g, b)
        params: Grading percentages

    Returns:
        The same array, for chaining
    """
    if params.is_neutral:
        return pixels

    work = pixels.astype(np.float64)

    brightness = params.brightness_factor
    if brightness != 1.0:
        work = _clamp(work * brightness)

    contrast = params.contrast_factor
    if contrast != 1.0:
        work = _clamp(contrast * (work - CONTRAST_PIVOT) + CONTRAST_PIVOT)

    saturation = params.saturation_factor
    if saturation != 1.0:
        pivot = np.sqrt((work * work) @ LUMA_WEIGHTS)[..., np.newaxis]
        work = _clamp(pivot + (work - pivot) * saturation)

    np.copyto(pixels, work.astype(np.uint8))
    return pixels


class ColorGradingPipeline:
    """
    Applies one fixed set of grading parameters to every frame.

    Attributes:
        params: Grading percentages
        frames_graded: Frames that went through at least one stage
    """

    def __init__(self, params: ColorGradingParams) -> None:
        self.params = params
        self.frames_graded: int = 0

        logger.info(
            f"ColorGradingPipeline initialized: "
            f"brightness={params.brightness} (x{params.brightness_factor:.3f}), "
            f"contrast={params.contrast} (x{params.contrast_factor:.3f}), "
            f"saturation={params.saturation} (x{params.saturation_factor:.3f})"
        )

    def apply(self, frame: Frame) -> Frame:
        """Grade the frame's pixel buffer in place."""
        if not self.params.is_neutral:
            apply_grading(frame.pixels, self.params)
            self.frames_graded += 1
        return frame
