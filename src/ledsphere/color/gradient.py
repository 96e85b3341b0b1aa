"""Gradient table: ordered color stops sampled by a scalar.

Blending happens in OkLCh so the midpoint of two stops looks halfway
between them, rather than the muddy average raw RGB gives.
"""

from dataclasses import dataclass
from typing import List, Sequence, Tuple

from coloraide import Color as _Coloraide

from .colors import Color, clamp_color

GRADIENT_KEYS = ("A", "B", "C", "D")
BLEND_SPACE = "oklch"


@dataclass(frozen=True)
class GradientStop:
    color: Color
    position: float


def blend_perceptual(color1: Color, color2: Color, weight: float) -> Color:
    """Blend two colors in OkLCh. weight 0=color1, 1=color2."""
    if weight <= 0.0:
        return color1
    if weight >= 1.0:
        return color2
    a = _Coloraide("srgb", list(color1))
    b = _Coloraide("srgb", list(color2))
    mixed = a.mix(b, weight, space=BLEND_SPACE, out_space="srgb")
    mixed.fit("srgb")
    return clamp_color(mixed.coords())


class GradientTable:
    """Color stops sorted by position.

    Stops come straight from the parameter store and may arrive out of
    order or with equal positions; they are stably sorted on build.
    """

    def __init__(self, stops: Sequence[GradientStop]):
        if not stops:
            raise ValueError("gradient needs at least one stop")
        self.stops: List[GradientStop] = sorted(stops, key=lambda s: s.position)

    @classmethod
    def from_control(cls, control, keys: Sequence[str] = GRADIENT_KEYS) -> "GradientTable":
        """Build from the named (color, var) pairs of a ParameterStore."""
        return cls([GradientStop(control.get_color(k), control.get_var(k)) for k in keys])

    def weight(self, index: int, t: float) -> float:
        """Interpolation weight of t inside the bracket starting at stop index."""
        lo = self.stops[index].position
        hi = self.stops[index + 1].position
        span = hi - lo
        if span <= 0.0:
            return 1.0
        return max(0.0, min(1.0, (t - lo) / span))

    def color_at(self, t: float) -> Color:
        """Interpolated color for t; clamps to the end stops outside the table."""
        first, last = self.stops[0], self.stops[-1]
        if t <= first.position:
            return first.color
        if t >= last.position:
            return last.color
        for i in range(len(self.stops) - 1):
            lo, hi = self.stops[i], self.stops[i + 1]
            if lo.position <= t <= hi.position:
                return blend_perceptual(lo.color, hi.color, self.weight(i, t))
        return last.color


LUT_SIZE = 257


class GradientLut:
    """color_at() precomputed at evenly spaced t in [0, 1].

    The noise animation samples the gradient once per pixel per frame;
    indexing this list replaces the per-pixel OkLCh blend. Build a new
    one when the stops change (compare against .stops).
    """

    def __init__(self, table: GradientTable, size: int = LUT_SIZE):
        if size < 2:
            raise ValueError("gradient lookup needs at least two entries")
        self.stops: Tuple[GradientStop, ...] = tuple(table.stops)
        self._last = size - 1
        self._colors: List[Color] = [table.color_at(i / self._last) for i in range(size)]

    def __len__(self) -> int:
        return len(self._colors)

    def color_at(self, t: float) -> Color:
        """Nearest precomputed color; t outside [0, 1] (or NaN) clamps to the ends."""
        if not t > 0.0:
            return self._colors[0]
        if t >= 1.0:
            return self._colors[-1]
        return self._colors[int(t * self._last + 0.5)]
