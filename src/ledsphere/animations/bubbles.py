"""
Bubbles - caps that grow every tick and pop.

A bubble is replaced by a fresh one when it reaches the configured area
ceiling or touches another bubble. Of two touching bubbles the smaller
one pops; on equal area the later one in the list pops.

New bubbles are placed away from the live ones (see spawn_center).
"""

import random
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..color.colors import Color, happy_color
from ..sphere.cap import Cap
from ..sphere.geo import Point, angular_distance
from ..sphere.pixels import PixelMap
from .base import Animation, Scene, paint_cap


@dataclass
class Bubble:
    cap: Cap
    color: Color


def is_separated(candidate: Point, radius: float, live: Sequence[Cap], factor: float) -> bool:
    """True when candidate keeps factor x radius away from every live cap (both radii checked)."""
    for cap in live:
        if angular_distance(candidate, cap.center) < factor * max(cap.radius, radius):
            return False
    return True


def spawn_center(
    pixels: PixelMap,
    live: Sequence[Cap],
    radius: float,
    rng: Optional[random.Random] = None,
    factor: float = 3.0,
    max_attempts: int = 100,
) -> Tuple[Point, bool]:
    """Pick a pixel position for a new cap.

    Samples random active pixels until one is far enough from every live
    cap. After max_attempts the last candidate is accepted even though it
    overlaps. Returns (center, separated).
    """
    candidate = pixels.random_active_pixel(rng).point
    attempts = 1
    while not is_separated(candidate, radius, live, factor):
        if attempts >= max_attempts:
            return candidate, False
        candidate = pixels.random_active_pixel(rng).point
        attempts += 1
    return candidate, True


class BubbleAnimation(Animation):
    """Growth-and-pop caps."""

    name = "bubbles"

    def __init__(self, scene: Scene):
        super().__init__(scene)
        self.cfg = scene.config.bubbles
        self.bubbles: List[Bubble] = []
        self.popped = 0
        self.overlapping_spawns = 0
        for _ in range(self.cfg.count):
            self.bubbles.append(self._spawn([b.cap for b in self.bubbles]))

    def _spawn(self, live: Sequence[Cap]) -> Bubble:
        radius = Cap.from_area((0.0, 0.0, 1.0), self.cfg.spawn_area).radius
        center, separated = spawn_center(
            self.scene.pixels, live, radius, self.scene.rng,
            self.cfg.separation_factor, self.cfg.max_spawn_attempts,
        )
        if not separated:
            self.overlapping_spawns += 1
        return Bubble(cap=Cap(center, radius), color=happy_color(self.scene.rng))

    def _doomed(self) -> List[int]:
        """Indexes of bubbles to replace this tick, ascending."""
        doomed = set()
        for i, b in enumerate(self.bubbles):
            if b.cap.area() >= self.cfg.max_area:
                doomed.add(i)
        for i in range(len(self.bubbles)):
            for j in range(i + 1, len(self.bubbles)):
                a, b = self.bubbles[i].cap, self.bubbles[j].cap
                if a.intersects(b):
                    doomed.add(i if a.area() < b.area() else j)
        return sorted(doomed)

    def step(self, elapsed: float, frame_count: int):
        for b in self.bubbles:
            b.cap = b.cap.expanded(self.cfg.growth)

        doomed = self._doomed()
        for i in doomed:
            live = [b.cap for k, b in enumerate(self.bubbles) if k != i and (k not in doomed or k < i)]
            self.bubbles[i] = self._spawn(live)
        self.popped += len(doomed)

    def composite(self):
        for b in self.bubbles:
            paint_cap(self.scene.pixels, b.cap, b.color)

    def report(self, frame_count: int) -> Optional[str]:
        line = f"bubbles popped: {self.popped} overlapping spawns: {self.overlapping_spawns}"
        self.popped = 0
        self.overlapping_spawns = 0
        return line
