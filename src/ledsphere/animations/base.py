"""Animation interface and the Scene every animation works on."""

import random
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Optional

from ..color.colors import Color
from ..config import LedSphereConfig
from ..control import ParameterStore
from ..sphere.cap import Cap
from ..sphere.pixels import PixelMap


@dataclass
class Scene:
    """Everything one animation may touch during a tick.

    Owned by the render loop and handed to the animation by reference.
    """
    pixels: PixelMap
    control: ParameterStore
    config: LedSphereConfig = field(default_factory=LedSphereConfig)
    rng: random.Random = field(default_factory=random.Random)


class Animation(ABC):
    """One pattern. The loop calls step() then composite() once per tick."""

    name: str = "animation"
    frame_delay: float = 0.0  # seconds the loop sleeps after submitting

    def __init__(self, scene: Scene):
        self.scene = scene

    @abstractmethod
    def step(self, elapsed: float, frame_count: int):
        """Advance internal state to `elapsed` seconds since start."""

    @abstractmethod
    def composite(self):
        """Set the color of active pixels for this tick."""

    def report(self, frame_count: int) -> Optional[str]:
        """Optional periodic diagnostic line."""
        return None

    def close(self):
        """Release worker resources."""


def paint_cap(pixels: PixelMap, cap: Cap, color: Color):
    """Color every active pixel inside cap. Later calls overwrite earlier ones."""
    for p in pixels.active():
        if cap.contains(p.point):
            p.color = color
