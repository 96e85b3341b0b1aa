"""Tests for noise normalization, the histogram and the OpenSimplex animation."""

import math
from unittest.mock import patch

import pytest
from coloraide import Color as Coloraide

from ledsphere.animations.noise import (
    NoiseHistogram,
    NoiseNormalizer,
    OpenSimplexAnimation,
    seed_gradient_controls,
)


def x_source(x, y, z, t):
    return x + t


class TestNormalizer:
    """Running-extrema normalization into [0, 1]."""

    def test_first_samples(self):
        n = NoiseNormalizer(spread=1.92)
        out = [n.normalize(s) for s in (-1.0, 1.0, 0.0)]
        assert out == pytest.approx([0.0, 1.0, 0.5])
        assert n.min == pytest.approx(-1.92)
        assert n.max == pytest.approx(1.92)

    def test_single_sample_is_zero(self):
        assert NoiseNormalizer().normalize(0.3) == 0.0

    def test_nan_is_zero_and_leaves_window(self):
        n = NoiseNormalizer()
        n.normalize(-1.0)
        n.normalize(1.0)
        assert n.normalize(math.nan) == 0.0
        assert n.min == pytest.approx(-1.92)
        assert n.max == pytest.approx(1.92)

    def test_output_in_range_and_window_only_widens(self):
        n = NoiseNormalizer(spread=2.5)
        last_min, last_max = math.inf, -math.inf
        for i in range(500):
            sample = math.sin(i * 0.37) * (1 + i / 100)
            v = n.normalize(sample)
            assert 0.0 <= v <= 1.0
            assert n.min <= n.max
            assert n.min <= last_min and n.max >= last_max
            last_min, last_max = n.min, n.max

    def test_feeds_histogram(self):
        h = NoiseHistogram(8)
        n = NoiseNormalizer(histogram=h)
        for s in (-1.0, 1.0, 0.0):
            n.normalize(s)
        assert len(h) == 3
        snap = h.snapshot()
        assert snap["min"] == 0.0
        assert snap["max"] == 1.0
        assert snap["p50"] == pytest.approx(0.5)


class TestHistogram:

    def test_empty_snapshot(self):
        assert NoiseHistogram(4).snapshot() is None

    def test_ring_keeps_most_recent(self):
        h = NoiseHistogram(3)
        for v in (100, 200, 300, 900, 800):
            h.update(v)
        assert len(h) == 3
        assert h.capacity == 3
        snap = h.snapshot()
        assert snap["min"] == pytest.approx(0.3)
        assert snap["max"] == pytest.approx(0.9)

    def test_snapshot_keys(self):
        h = NoiseHistogram(10)
        for v in range(10):
            h.update(v * 100)
        assert list(h.snapshot()) == ["min"] + [f"p{p}" for p in range(10, 100, 10)] + ["max"]

    def test_rejects_zero_capacity(self):
        with pytest.raises(ValueError):
            NoiseHistogram(0)


class TestOpenSimplexAnimation:

    def test_seeds_gradient_controls(self, make_scene, tiny_pixels):
        scene = make_scene(tiny_pixels)
        OpenSimplexAnimation(scene, source=x_source)
        assert scene.control.get_var("D") == 1.0
        assert scene.control.get_color_hex("B") == "000000"

    def test_histogram_capacity_follows_pixel_count(self, make_scene, tiny_pixels, config):
        anim = OpenSimplexAnimation(make_scene(tiny_pixels), source=x_source)
        assert anim.histogram.capacity == 4 * config.noise.histogram_samples_per_pixel

    def test_samples_in_active_pixel_order(self, make_scene, tiny_pixels):
        anim = OpenSimplexAnimation(make_scene(tiny_pixels), source=x_source)
        samples = anim.sample_all(0.0)
        assert samples == [p.point[0] for p in tiny_pixels.active()]

    def test_time_is_scaled(self, make_scene, tiny_pixels, config):
        seen = []
        anim = OpenSimplexAnimation(make_scene(tiny_pixels), source=lambda x, y, z, t: seen.append(t) or 0.0)
        anim.step(10.0, 0)
        assert seen and all(t == pytest.approx(10.0 * config.noise.time_scale) for t in seen)

    def test_composite_colors_every_active_pixel(self, make_scene, ball_pixels):
        anim = OpenSimplexAnimation(make_scene(ball_pixels))
        anim.step(0.0, 0)
        anim.composite()
        for p in ball_pixels.active():
            assert p.color is not None
            assert all(0.0 <= c <= 1.0 for c in p.color)
        anim.close()

    def test_composite_uses_gradient(self, make_scene, tiny_pixels):
        anim = OpenSimplexAnimation(make_scene(tiny_pixels), source=x_source)
        anim.step(0.0, 0)
        anim.composite()
        gradient = anim.gradient
        # The first pixel fixes both ends of the window, so it maps to 0.0
        assert tiny_pixels.active()[0].color == gradient.color_at(0.0)

    def test_gradient_blends_only_when_stops_change(self, make_scene, ball_pixels):
        anim = OpenSimplexAnimation(make_scene(ball_pixels), source=x_source)
        with patch("ledsphere.color.gradient._Coloraide", wraps=Coloraide) as built:
            anim.step(0.0, 0)
            anim.composite()
            first_frame = built.call_count
            anim.step(0.1, 1)
            anim.composite()
            assert built.call_count == first_frame
        # Two conversions per blended entry, independent of pixel count
        assert 0 < first_frame <= 2 * len(anim.lut)

    def test_lookup_rebuilt_when_stop_moves(self, make_scene, tiny_pixels):
        scene = make_scene(tiny_pixels)
        anim = OpenSimplexAnimation(scene, source=x_source)
        anim.step(0.0, 0)
        first = anim.lut
        anim.step(0.1, 1)
        assert anim.lut is first

        scene.control.set_color("D", (0.0, 1.0, 0.0))
        anim.step(0.2, 2)
        assert anim.lut is not first
        assert anim.lut.color_at(1.0) == (0.0, 1.0, 0.0)

    def test_parallel_sampling_matches_serial(self, make_scene, ball_pixels, config):
        serial = OpenSimplexAnimation(make_scene(ball_pixels), source=x_source)
        config.render.workers = 3
        parallel = OpenSimplexAnimation(make_scene(ball_pixels), source=x_source)
        try:
            assert parallel.sample_all(1.5) == serial.sample_all(1.5)
        finally:
            parallel.close()

    def test_report_only_when_enabled(self, make_scene, tiny_pixels, config):
        anim = OpenSimplexAnimation(make_scene(tiny_pixels), source=x_source)
        anim.step(0.0, 0)
        anim.composite()
        assert anim.report(1000) is None

        config.noise.report_histogram = True
        anim = OpenSimplexAnimation(make_scene(tiny_pixels), source=x_source)
        anim.step(0.0, 0)
        anim.composite()
        assert anim.report(1000).startswith("Normalized histo: min:")


def test_seed_gradient_controls_positions(control):
    seed_gradient_controls(control)
    assert [control.get_var(k) for k in "ABCD"] == [0.0, 0.1, 0.9, 1.0]
