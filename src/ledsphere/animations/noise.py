"""
OpenSimplex noise animation.

Each active pixel samples 4-D noise at (x, y, z, t). Raw noise has no
fixed range, so NoiseNormalizer maps it into [0, 1] using the widest
window seen so far, and the gradient table turns that into a color.
"""

import math
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np
from opensimplex import OpenSimplex

from ..color.colors import from_hsv
from ..color.gradient import GRADIENT_KEYS, GradientLut, GradientTable
from ..sphere.geo import Point
from .base import Animation, Scene

NoiseSource = Callable[[float, float, float, float], float]

HISTOGRAM_SCALE = 1000
PERCENTILES = (10, 20, 30, 40, 50, 60, 70, 80, 90)


class NoiseHistogram:
    """Ring buffer of the most recent normalized samples, stored as ints (x1000).

    Diagnostic only; nothing in the render path reads it.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("histogram capacity must be positive")
        self._buf = np.zeros(capacity, dtype=np.int16)
        self._next = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        return len(self._buf)

    def __len__(self) -> int:
        return self._count

    def update(self, value: int):
        self._buf[self._next] = value
        self._next = (self._next + 1) % len(self._buf)
        self._count = min(self._count + 1, len(self._buf))

    def snapshot(self) -> Optional[Dict[str, float]]:
        """min, p10..p90, max of the window, scaled back to [0, 1]."""
        if self._count == 0:
            return None
        data = self._buf[:self._count] if self._count < len(self._buf) else self._buf
        values = np.percentile(data, PERCENTILES)
        snap = {"min": float(data.min()) / HISTOGRAM_SCALE}
        for p, v in zip(PERCENTILES, values):
            snap[f"p{p}"] = float(v) / HISTOGRAM_SCALE
        snap["max"] = float(data.max()) / HISTOGRAM_SCALE
        return snap


class NoiseNormalizer:
    """Rescales unbounded samples into [0, 1] from running extrema.

    The window only ever widens, so output settles after the first few
    seconds of an animation and then stays stable.
    """

    def __init__(self, spread: float = 1.92, histogram: Optional[NoiseHistogram] = None):
        self.spread = spread
        self.min = math.inf
        self.max = -math.inf
        self.histogram = histogram

    def normalize(self, sample: float) -> float:
        value = sample * self.spread
        if math.isnan(value):
            return 0.0
        self.min = min(self.min, value)
        self.max = max(self.max, value)
        value = max(self.min, min(self.max, value))
        span = self.max - self.min
        normalized = (value - self.min) / span if span > 0 else 0.0
        if self.histogram is not None:
            self.histogram.update(int(normalized * HISTOGRAM_SCALE))
        return normalized


def seed_gradient_controls(control):
    """Default 4-stop gradient: dim red, black, black, dim purple."""
    colors = (
        from_hsv(0.0, 1.0, 0.3),
        from_hsv(0.0, 1.0, 0.0),
        from_hsv(234.0, 0.0, 0.0),
        from_hsv(234.0, 1.0, 0.3),
    )
    positions = (0.0, 0.1, 0.9, 1.0)
    for key, color, position in zip(GRADIENT_KEYS, colors, positions):
        control.set_color(key, color)
        control.set_var(key, position)


class OpenSimplexAnimation(Animation):
    """Noise field mapped through the A-D gradient."""

    name = "opensimplex"

    def __init__(self, scene: Scene, source: Optional[NoiseSource] = None):
        super().__init__(scene)
        cfg = scene.config.noise
        seed_gradient_controls(scene.control)

        if source is None:
            source = OpenSimplex(seed=scene.rng.randrange(2 ** 31)).noise4
        self._source = source
        self._time_scale = cfg.time_scale

        active = scene.pixels.active()
        self.histogram = NoiseHistogram(len(active) * cfg.histogram_samples_per_pixel)
        self.normalizer = NoiseNormalizer(cfg.spread, self.histogram)
        self._report_histogram = cfg.report_histogram

        workers = scene.config.render.workers
        self._executor = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="noise") if workers > 0 else None
        self._batch_size = max(1, math.ceil(len(active) / workers)) if workers > 0 else len(active)

        self.gradient: Optional[GradientTable] = None
        self.lut: Optional[GradientLut] = None
        self._samples: List[float] = []

    def _sample_batch(self, points: Sequence[Point], t: float) -> List[float]:
        source = self._source
        return [source(x, y, z, t) for x, y, z in points]

    def sample_all(self, t: float) -> List[float]:
        """One raw sample per active pixel, in active-pixel order."""
        points = [p.point for p in self.scene.pixels.active()]
        if self._executor is None:
            return self._sample_batch(points, t)
        futures = [
            self._executor.submit(self._sample_batch, points[i:i + self._batch_size], t)
            for i in range(0, len(points), self._batch_size)
        ]
        samples: List[float] = []
        for future in futures:
            samples.extend(future.result())
        return samples

    def step(self, elapsed: float, frame_count: int):
        # Read every tick: the HTTP surface may have moved a stop
        self.gradient = GradientTable.from_control(self.scene.control)
        if self.lut is None or self.lut.stops != tuple(self.gradient.stops):
            self.lut = GradientLut(self.gradient)
        self._samples = self.sample_all(elapsed * self._time_scale)

    def composite(self):
        color_at = self.lut.color_at
        normalize = self.normalizer.normalize
        for p, sample in zip(self.scene.pixels.active(), self._samples):
            p.color = color_at(normalize(sample))

    def report(self, frame_count: int) -> Optional[str]:
        if not self._report_histogram:
            return None
        snap = self.histogram.snapshot()
        if snap is None:
            return None
        return "Normalized histo: " + " ".join(
            f"{k.upper() if k.startswith('p') else k}: {v:.3f}" for k, v in snap.items()
        )

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
