"""Color values and gradient tables."""

from .colors import (
    BLACK,
    Color,
    blend_colors,
    fade,
    from_hsv,
    happy_color,
    parse_hex,
    to_hex,
    to_rgb255,
    warm_color,
)
from .gradient import GRADIENT_KEYS, GradientLut, GradientStop, GradientTable, blend_perceptual

__all__ = [
    "BLACK",
    "Color",
    "GRADIENT_KEYS",
    "GradientLut",
    "GradientStop",
    "GradientTable",
    "blend_colors",
    "blend_perceptual",
    "fade",
    "from_hsv",
    "happy_color",
    "parse_hex",
    "to_hex",
    "to_rgb255",
    "warm_color",
]
