"""
Colour Grading Parameters
=========================

User-facing brightness/contrast/saturation percentages and the
multiplicative factors derived from them.

Range Rule:
    Each value must lie in [0, 100]. If ANY one is out of range the whole
    triple falls back to 50/50/50 (neutral), rather than clamping the
    offending value alone.

Factors:
    brightness_factor = (brightness + 10) / 60
    contrast_factor   = contrast / 50
    saturation_factor = saturation / 50

Example:
    params = ColorGradingParams(brightness=70, contrast=50, saturation=20)
    params.brightness_factor  # 1.333...
"""

import logging
from typing import Any

from pydantic import BaseModel, Field, model_validator


logger = logging.getLogger(__name__)


NEUTRAL = 50
GRADING_MIN = 0
GRADING_MAX = 100


class ColorGradingParams(BaseModel):
    """
    Brightness, contrast and saturation as integer percentages.

    Attributes:
        brightness: 0-100, 50 is neutral
        contrast: 0-100, 50 is neutral
        saturation: 0-100, 50 is neutral
    """

    brightness: int = Field(default=NEUTRAL, description="Brightness percentage")
    contrast: int = Field(default=NEUTRAL, description="Contrast percentage")
    saturation: int = Field(default=NEUTRAL, description="Saturation percentage")

    @model_validator(mode="before")
    @classmethod
    def _reset_out_of_range(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        values = [
            data.get(name, NEUTRAL)
            for name in ("brightness", "contrast", "saturation")
        ]
        try:
            in_range = all(GRADING_MIN <= int(v) <= GRADING_MAX for v in values)
        except (TypeError, ValueError):
            # Let field validation report non-integers
            return data

        if not in_range:
            logger.warning(
                f"Brightness, contrast and saturation must be between "
                f"{GRADING_MIN}-{GRADING_MAX}, got {values}; using neutral values"
            )
            return {
                "brightness": NEUTRAL,
                "contrast": NEUTRAL,
                "saturation": NEUTRAL,
            }
        return data

    @property
    def brightness_factor(self) -> float:
        """Offset so brightness 0 never yields a fully black frame."""
        return (self.brightness + 10) / 60.0

    @property
    def contrast_factor(self) -> float:
        return self.contrast / 50.0

    @property
    def saturation_factor(self) -> float:
        return self.saturation / 50.0

    @property
    def is_neutral(self) -> bool:
        """Whether every stage of the pipeline would be skipped."""
        return (
            self.brightness_factor == 1.0
            and self.contrast_factor == 1.0
            and self.saturation_factor == 1.0
        )
