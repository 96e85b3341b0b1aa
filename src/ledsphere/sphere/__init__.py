"""
Sphere geometry.

Submodules:
- geo: unit-vector points, angular distance, ellipsoid travel, bearings
- cap: Cap (circular region)
- pixels: Pixel, PixelMap, built-in layout and layout loader
"""

from .cap import Cap, FULL_SPHERE_AREA, FULL_SPHERE_RADIUS
from .geo import (
    NORTH_POLE,
    SOUTH_POLE,
    Point,
    angular_distance,
    latlng_from_point,
    point_from_latlng,
    reverse_bearing,
    translate,
)
from .pixels import Pixel, PixelMap, build_default_layout, load_layout, load_pixel_map

__all__ = [
    "Cap",
    "FULL_SPHERE_AREA",
    "FULL_SPHERE_RADIUS",
    "NORTH_POLE",
    "SOUTH_POLE",
    "Pixel",
    "PixelMap",
    "Point",
    "angular_distance",
    "build_default_layout",
    "latlng_from_point",
    "load_layout",
    "load_pixel_map",
    "point_from_latlng",
    "reverse_bearing",
    "translate",
]
