"""
Shared test fixtures for the ledsphere test suite.

Local fixtures in individual test files override these (pytest convention).
"""

import random

import pytest

from ledsphere.animations.base import Scene
from ledsphere.config import LedSphereConfig
from ledsphere.control import ParameterStore
from ledsphere.sphere.geo import point_from_latlng
from ledsphere.sphere.pixels import Pixel, PixelMap, build_default_layout


# ---------------------------------------------------------------------------
# Parameter store
# ---------------------------------------------------------------------------

@pytest.fixture
def control():
    return ParameterStore()


# ---------------------------------------------------------------------------
# Pixel tables
# ---------------------------------------------------------------------------

@pytest.fixture
def tiny_pixels():
    """Five slots: north pole, three on the equator, one disabled."""
    return PixelMap([
        Pixel(row=0, col=0, point=point_from_latlng(90.0, 0.0)),
        Pixel(row=1, col=0, point=point_from_latlng(0.0, 0.0)),
        Pixel(row=1, col=1, point=point_from_latlng(0.0, 90.0)),
        Pixel(row=1, col=2, disabled=True),
        Pixel(row=1, col=3, point=point_from_latlng(0.0, 180.0)),
    ])


@pytest.fixture
def ball_pixels():
    """The built-in 20 x 64 ball."""
    return PixelMap(build_default_layout())


# ---------------------------------------------------------------------------
# Scenes
# ---------------------------------------------------------------------------

@pytest.fixture
def config():
    cfg = LedSphereConfig()
    cfg.noise.histogram_samples_per_pixel = 10
    cfg.movers.frame_delay = 0.0
    return cfg


@pytest.fixture
def make_scene(control, config):
    """Factory: Scene over the given pixels with a seeded RNG."""
    def _make(pixels, seed=1234):
        return Scene(pixels=pixels, control=control, config=config, rng=random.Random(seed))
    return _make
