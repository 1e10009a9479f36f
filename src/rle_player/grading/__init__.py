"""
Grading Module
==============

Brightness/contrast/saturation adjustment applied to decoded frames.
"""

from rle_player.grading.pipeline import ColorGradingPipeline, apply_grading


__all__ = [
    "ColorGradingPipeline",
    "apply_grading",
]
