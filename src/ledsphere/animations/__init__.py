"""
Animations.

Submodules:
- base: Animation, Scene, paint_cap
- noise: NoiseNormalizer, NoiseHistogram, OpenSimplexAnimation
- bubbles: Bubble, spawn_center, BubbleAnimation
- movers: Mover, MoverAnimation
- diagnostics: GradientTestAnimation, BrightnessTestAnimation, TestPatternAnimation
"""

from typing import Dict, Type

from .base import Animation, Scene, paint_cap
from .bubbles import Bubble, BubbleAnimation, spawn_center
from .diagnostics import BrightnessTestAnimation, GradientTestAnimation, TestPatternAnimation
from .movers import Mover, MoverAnimation
from .noise import NoiseHistogram, NoiseNormalizer, OpenSimplexAnimation

ANIMATIONS: Dict[str, Type[Animation]] = {
    cls.name: cls
    for cls in (
        OpenSimplexAnimation,
        BubbleAnimation,
        MoverAnimation,
        GradientTestAnimation,
        BrightnessTestAnimation,
        TestPatternAnimation,
    )
}


def create_animation(name: str, scene: Scene) -> Animation:
    """Instantiate a registered animation by name."""
    try:
        cls = ANIMATIONS[name]
    except KeyError:
        raise ValueError(f"unknown animation {name!r}; choose from {', '.join(sorted(ANIMATIONS))}") from None
    return cls(scene)


__all__ = [
    "ANIMATIONS",
    "Animation",
    "Bubble",
    "BubbleAnimation",
    "BrightnessTestAnimation",
    "GradientTestAnimation",
    "Mover",
    "MoverAnimation",
    "NoiseHistogram",
    "NoiseNormalizer",
    "OpenSimplexAnimation",
    "Scene",
    "TestPatternAnimation",
    "create_animation",
    "paint_cap",
]
