"""Bring-up patterns for checking wiring, geometry and brightness."""

from typing import List, Optional, Tuple

from ..color.colors import BLUE, GREEN, RED, Color
from ..sphere.geo import latlng_from_point
from .base import Animation, Scene
from .noise import seed_gradient_controls


class GradientTestAnimation(Animation):
    """Everything south of latitude A*180-90 lights red; slide var A to sweep."""

    name = "gradient_test"
    frame_delay = 0.1

    def __init__(self, scene: Scene):
        super().__init__(scene)
        seed_gradient_controls(scene.control)
        self.latitude = -90.0

    def step(self, elapsed: float, frame_count: int):
        self.latitude = self.scene.control.get_var("A") * 180.0 - 90.0

    def composite(self):
        for p in self.scene.pixels.active():
            lat, _ = latlng_from_point(p.point)
            if lat < self.latitude:
                p.color = RED

    def report(self, frame_count: int) -> Optional[str]:
        return f"gradient test latitude: {self.latitude:.2f}"


class BrightnessTestAnimation(Animation):
    """Red ramp across the columns.

    The wire carries bytes, so the dimmest visible level is 2/255.
    """

    name = "brightness_test"
    frame_delay = 0.5

    def step(self, elapsed: float, frame_count: int):
        pass

    def composite(self):
        columns = self.scene.config.sphere.columns
        for p in self.scene.pixels.active():
            p.color = (p.col / columns, 0.0, 0.0)


class TestPatternAnimation(Animation):
    """Lights one row per tick in red, green, blue, then one column per tick."""

    __test__ = False  # not a pytest class despite the name
    name = "test_pattern"
    frame_delay = 0.05

    def __init__(self, scene: Scene):
        super().__init__(scene)
        pixels = scene.pixels
        self._sequence: List[Tuple[str, int, Color]] = []
        for color in (RED, GREEN, BLUE):
            self._sequence.extend(("row", r, color) for r in sorted(pixels.rows))
        for color in (RED, GREEN, BLUE):
            self._sequence.extend(("column", c, color) for c in sorted(pixels.columns))
        self.current: Tuple[str, int, Color] = self._sequence[0]

    def step(self, elapsed: float, frame_count: int):
        self.current = self._sequence[frame_count % len(self._sequence)]

    def composite(self):
        kind, index, color = self.current
        group = self.scene.pixels.rows if kind == "row" else self.scene.pixels.columns
        for p in group.get(index, []):
            p.color = color

    def report(self, frame_count: int) -> Optional[str]:
        kind, index, _ = self.current
        return f"test pattern at {kind} {index}"
