"""
Movers - caps that travel along a compass bearing.

Every tick a mover moves `speed` km further along its bearing, measured
on the ellipsoid from its fixed start point. It fades as it uses up its
distance budget and is marked done when the budget is spent; the
animation swaps done movers for fresh ones on the following tick.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Deque, List, Optional

from ..color.colors import BLACK, Color, fade, from_hsv, to_hsv, warm_color
from ..sphere.cap import Cap
from ..sphere.geo import Point, float_equal, latlng_from_point, translate
from .base import Animation, Scene, paint_cap


@dataclass(frozen=True)
class TailEntry:
    cap: Cap
    color: Color


@dataclass
class Mover:
    cap: Cap
    start_point: Point
    speed: float
    base_color: Color
    bearing: float
    total_distance: Optional[float] = None
    distance_so_far: float = 0.0
    done: bool = False
    tail_length: int = 0
    color: Optional[Color] = None
    tail: Deque[TailEntry] = field(default_factory=deque)

    def __post_init__(self):
        if self.color is None:
            self.color = self.base_color
        self.tail = deque(self.tail, maxlen=self.tail_length) if self.tail_length > 0 else deque(maxlen=0)

    def __str__(self) -> str:
        lat, lng = latlng_from_point(self.cap.center)
        return f"({lat:.2f}, {lng:.2f}) bearing: {self.bearing:3.2f}"

    def _budget_spent(self) -> bool:
        if self.total_distance is None:
            return False
        return self.distance_so_far > self.total_distance or float_equal(self.distance_so_far, self.total_distance)

    def advance(self, dt: float = 1.0):
        """Travel speed * dt further. Marks done once the budget is used up."""
        if self.done:
            return
        if self._budget_spent():
            self.done = True
            return

        travelled = self.distance_so_far + self.speed * dt
        if self.total_distance is not None:
            travelled = min(travelled, self.total_distance)

        if self.tail.maxlen:
            self.tail.append(TailEntry(self.cap, self.color))

        self.distance_so_far = travelled
        if self.total_distance:
            used = min(1.0, travelled / self.total_distance)
            h, s, v = to_hsv(self.base_color)
            self.color = from_hsv(h, s, min(1.0, v * (1.0 - used) + 0.01))

        self.cap = self.cap.moved(translate(self.start_point, travelled, self.bearing))

        if self._budget_spent():
            self.done = True

    def tail_colors(self) -> List[TailEntry]:
        """Tail snapshots oldest first, each faded toward black by i / K."""
        k = self.tail.maxlen or 0
        return [TailEntry(e.cap, fade(e.color, i / k)) for i, e in enumerate(self.tail)]


class MoverAnimation(Animation):
    """A fixed number of movers, replaced as they finish."""

    name = "movers"

    def __init__(self, scene: Scene):
        super().__init__(scene)
        self.cfg = scene.config.movers
        self.frame_delay = self.cfg.frame_delay
        self.movers: List[Mover] = [self.new_mover() for _ in range(self.cfg.count)]
        self.respawned = 0

    def new_mover(self) -> Mover:
        rng = self.scene.rng
        center = self.scene.pixels.random_active_pixel(rng).point
        return Mover(
            cap=Cap.from_area(center, self.cfg.area),
            start_point=center,
            speed=rng.uniform(self.cfg.min_speed, self.cfg.max_speed),
            base_color=warm_color(rng),
            bearing=rng.randrange(3600) / 10.0,
            total_distance=rng.uniform(self.cfg.min_distance, self.cfg.max_distance),
            tail_length=self.cfg.tail_length,
        )

    def step(self, elapsed: float, frame_count: int):
        for i, m in enumerate(self.movers):
            if m.done:
                self.movers[i] = self.new_mover()
                self.respawned += 1
                continue
            m.advance()

    def composite(self):
        pixels = self.scene.pixels
        for m in self.movers:
            for entry in m.tail_colors():
                # Weight 0: fully faded, nothing to draw
                if entry.color == BLACK:
                    continue
                paint_cap(pixels, entry.cap, entry.color)
            paint_cap(pixels, m.cap, m.color)

    def report(self, frame_count: int) -> Optional[str]:
        line = f"movers respawned: {self.respawned}"
        self.respawned = 0
        return line
