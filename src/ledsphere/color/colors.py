"""Color values: float RGB in [0, 1], hex and HSV helpers, palettes.

Colors stay floating point through the whole frame and are only
quantized to bytes (with brightness applied) by the output stage.
"""

import colorsys
import random
from typing import Optional, Sequence, Tuple

Color = Tuple[float, float, float]

BLACK: Color = (0.0, 0.0, 0.0)
RED: Color = (1.0, 0.0, 0.0)
GREEN: Color = (0.0, 1.0, 0.0)
BLUE: Color = (0.0, 0.0, 1.0)


def clamp_color(color: Sequence[float]) -> Color:
    """Clamp each channel into [0, 1]. NaN channels become 0."""
    out = []
    for c in color[:3]:
        if c != c:  # NaN
            c = 0.0
        out.append(max(0.0, min(1.0, float(c))))
    return (out[0], out[1], out[2])


def from_hsv(hue: float, saturation: float, value: float) -> Color:
    """Build a color from hue in degrees, saturation and value in [0, 1]."""
    r, g, b = colorsys.hsv_to_rgb((hue % 360.0) / 360.0, saturation, value)
    return (r, g, b)


def to_hsv(color: Color) -> Tuple[float, float, float]:
    """Return (hue degrees, saturation, value)."""
    h, s, v = colorsys.rgb_to_hsv(*color)
    return (h * 360.0, s, v)


def parse_hex(text: str) -> Color:
    """Parse 'rrggbb' or '#rrggbb'. Raises ValueError on anything else."""
    text = text.strip().lstrip("#")
    if len(text) != 6:
        raise ValueError(f"expected 6 hex digits, got {text!r}")
    value = int(text, 16)
    return (
        ((value >> 16) & 0xFF) / 255.0,
        ((value >> 8) & 0xFF) / 255.0,
        (value & 0xFF) / 255.0,
    )


def to_hex(color: Color) -> str:
    """Format as 6 lowercase hex digits without the leading '#'."""
    r, g, b = to_rgb255(color)
    return f"{r:02x}{g:02x}{b:02x}"


def to_rgb255(color: Color, brightness: float = 1.0) -> Tuple[int, int, int]:
    """Scale by brightness and quantize to 8-bit channels."""
    r, g, b = clamp_color(color)
    brightness = max(0.0, min(1.0, brightness))
    return (
        int(r * brightness * 255.0 + 0.5),
        int(g * brightness * 255.0 + 0.5),
        int(b * brightness * 255.0 + 0.5),
    )


def blend_colors(color1: Color, color2: Color, ratio: float) -> Color:
    """Linear RGB blend. ratio 0=color1, 1=color2."""
    ratio = max(0.0, min(1.0, ratio))
    return (
        color1[0] * (1 - ratio) + color2[0] * ratio,
        color1[1] * (1 - ratio) + color2[1] * ratio,
        color1[2] * (1 - ratio) + color2[2] * ratio,
    )


def fade(color: Color, weight: float) -> Color:
    """Blend toward black. weight 1 keeps the color, 0 is black."""
    return blend_colors(BLACK, color, weight)


def happy_color(rng: Optional[random.Random] = None) -> Color:
    """Random saturated, fairly bright color."""
    rng = rng or random
    return from_hsv(rng.random() * 360.0, 0.7 + rng.random() * 0.3, 0.6 + rng.random() * 0.3)


def warm_color(rng: Optional[random.Random] = None) -> Color:
    """Random muted, dim color."""
    rng = rng or random
    return from_hsv(rng.random() * 360.0, 0.1 + rng.random() * 0.3, 0.2 + rng.random() * 0.3)
