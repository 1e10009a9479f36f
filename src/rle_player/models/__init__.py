"""
Data Models
===========

Typed values passed between pipeline stages.

Models:
    - Header: Parsed P6 header (width, height, max value)
    - Frame: One decoded RGB frame backed by a numpy array
    - Plane: Alias for a flattened single-channel uint8 array
    - ColorGradingParams: Brightness/contrast/saturation percentages
"""

from rle_player.models.header import Header, MAGIC, MAX_VALUE
from rle_player.models.frame import Frame, Plane
from rle_player.models.grading import ColorGradingParams

__all__ = [
    "Header",
    "MAGIC",
    "MAX_VALUE",
    "Frame",
    "Plane",
    "ColorGradingParams",
]
