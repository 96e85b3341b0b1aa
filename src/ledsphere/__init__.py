"""
ledsphere - procedural animation engine for a spherical LED display.

Pixels live on a unit sphere; animations paint them with noise fields,
growing bubbles and moving caps; the render loop streams each frame to
the LED strip.
"""

__version__ = "0.1.0"

from .animations import ANIMATIONS, Animation, Scene, create_animation
from .color import GradientStop, GradientTable
from .config import ConfigManager, LedSphereConfig
from .control import ParameterStore
from .output import FrameHandoff, OutputStage, RenderFrame
from .render import RenderLoop
from .sphere import Cap, Pixel, PixelMap

__all__ = [
    "ANIMATIONS",
    "Animation",
    "Cap",
    "ConfigManager",
    "FrameHandoff",
    "GradientStop",
    "GradientTable",
    "LedSphereConfig",
    "OutputStage",
    "ParameterStore",
    "Pixel",
    "PixelMap",
    "RenderFrame",
    "RenderLoop",
    "Scene",
    "create_animation",
]
