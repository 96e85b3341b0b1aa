"""
Tests for config module - validation, file round-trips and fallback to defaults.

Run with: pytest tests/test_config.py -v
"""

import json

import pytest
import yaml

from ledsphere.config import (
    AREA_PER_PIXEL,
    BubbleConfig,
    ConfigManager,
    LedSphereConfig,
    MoverConfig,
    RenderConfig,
)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidation:
    """Validation rules for the top-level config."""

    def test_defaults_are_valid(self):
        valid, error = LedSphereConfig().validate()
        assert valid is True, f"Default config should be valid: {error}"

    @pytest.mark.parametrize("brightness", [-0.1, 1.1])
    def test_brightness_out_of_range(self, brightness):
        cfg = LedSphereConfig(render=RenderConfig(brightness=brightness))
        valid, error = cfg.validate()
        assert valid is False
        assert "brightness" in error

    def test_negative_count(self):
        cfg = LedSphereConfig(bubbles=BubbleConfig(count=-1))
        valid, error = cfg.validate()
        assert valid is False
        assert "count" in error

    def test_speed_range_must_be_ordered(self):
        cfg = LedSphereConfig(movers=MoverConfig(min_speed=900, max_speed=100))
        valid, error = cfg.validate()
        assert valid is False
        assert "speed" in error

    def test_distance_range_must_be_ordered(self):
        cfg = LedSphereConfig(movers=MoverConfig(min_distance=5000, max_distance=10))
        valid, error = cfg.validate()
        assert valid is False
        assert "distance" in error

    def test_spawn_area_above_max_area(self):
        cfg = LedSphereConfig(bubbles=BubbleConfig(spawn_area=2.0, max_area=1.0))
        valid, error = cfg.validate()
        assert valid is False
        assert "area" in error

    def test_spread_must_be_positive(self):
        cfg = LedSphereConfig()
        cfg.noise.spread = 0.0
        valid, error = cfg.validate()
        assert valid is False
        assert "spread" in error

    def test_unknown_backend(self):
        cfg = LedSphereConfig()
        cfg.output.backend = "ws2812"
        valid, error = cfg.validate()
        assert valid is False
        assert "backend" in error

    def test_bad_port(self):
        cfg = LedSphereConfig()
        cfg.control.port = 70000
        valid, error = cfg.validate()
        assert valid is False
        assert "port" in error


# ---------------------------------------------------------------------------
# Dict round-trip
# ---------------------------------------------------------------------------

class TestDict:

    def test_defaults(self):
        cfg = LedSphereConfig()
        assert cfg.sphere.rows == 20
        assert cfg.sphere.columns == 64
        assert cfg.noise.spread == 1.92
        assert cfg.bubbles.spawn_area == AREA_PER_PIXEL
        assert cfg.control.port == 4000

    def test_round_trip(self):
        cfg = LedSphereConfig()
        cfg.render.animation = "bubbles"
        cfg.movers.tail_length = 5
        restored = LedSphereConfig.from_dict(cfg.to_dict())
        assert restored == cfg

    def test_partial_dict_keeps_defaults(self):
        cfg = LedSphereConfig.from_dict({"render": {"brightness": 0.25}})
        assert cfg.render.brightness == 0.25
        assert cfg.render.animation == "opensimplex"
        assert cfg.movers.count == 20

    def test_none_is_defaults(self):
        assert LedSphereConfig.from_dict(None) == LedSphereConfig()

    @pytest.mark.parametrize("data", [[1, 2], "movers", 7])
    def test_non_mapping_rejected(self, data):
        with pytest.raises(ValueError, match="mapping"):
            LedSphereConfig.from_dict(data)

    def test_empty_section_keeps_defaults(self):
        cfg = LedSphereConfig.from_dict({"render": {"animation": "bubbles"}, "sphere": None})
        assert cfg.render.animation == "bubbles"
        assert cfg.sphere.rows == 20


# ---------------------------------------------------------------------------
# ConfigManager
# ---------------------------------------------------------------------------

class TestConfigManager:
    """Load / save through YAML and JSON files."""

    def test_missing_file_gives_defaults(self, tmp_path):
        cfg = ConfigManager(tmp_path / "absent.yaml").load()
        assert cfg == LedSphereConfig()

    def test_load_yaml(self, tmp_path):
        path = tmp_path / "ledsphere.yaml"
        path.write_text(yaml.dump({"render": {"animation": "movers"}, "movers": {"count": 3}}))
        cfg = ConfigManager(path).load()
        assert cfg.render.animation == "movers"
        assert cfg.movers.count == 3

    def test_load_json(self, tmp_path):
        path = tmp_path / "ledsphere.json"
        path.write_text(json.dumps({"control": {"port": 8080}}))
        assert ConfigManager(path).load().control.port == 8080

    def test_invalid_values_fall_back(self, tmp_path, capsys):
        path = tmp_path / "ledsphere.yaml"
        path.write_text(yaml.dump({"render": {"brightness": 3.0}}))
        cfg = ConfigManager(path).load()
        assert cfg.render.brightness == 1.0
        assert "[Config] Warning" in capsys.readouterr().err

    def test_unknown_key_falls_back(self, tmp_path, capsys):
        path = tmp_path / "ledsphere.yaml"
        path.write_text(yaml.dump({"render": {"sparkle": True}}))
        cfg = ConfigManager(path).load()
        assert cfg == LedSphereConfig()
        assert "[Config] Error loading config" in capsys.readouterr().err

    def test_malformed_yaml_falls_back(self, tmp_path):
        path = tmp_path / "ledsphere.yaml"
        path.write_text("render: [unclosed")
        assert ConfigManager(path).load() == LedSphereConfig()

    def test_top_level_list_falls_back(self, tmp_path, capsys):
        path = tmp_path / "ledsphere.yaml"
        path.write_text("- 1\n- 2\n")
        assert ConfigManager(path).load() == LedSphereConfig()
        assert "[Config] Error loading config" in capsys.readouterr().err

    def test_empty_yaml_section_is_ignored(self, tmp_path):
        path = tmp_path / "ledsphere.yaml"
        path.write_text("render:\n  animation: bubbles\nsphere:\n")
        cfg = ConfigManager(path).load()
        assert cfg.render.animation == "bubbles"
        assert cfg.sphere == LedSphereConfig().sphere

    def test_load_is_cached(self, tmp_path):
        path = tmp_path / "ledsphere.yaml"
        manager = ConfigManager(path)
        first = manager.load()
        path.write_text(yaml.dump({"movers": {"count": 1}}))
        assert manager.load() is first
        assert manager.reload().movers.count == 1

    @pytest.mark.parametrize("name", ["saved.yaml", "saved.json"])
    def test_save_round_trip(self, tmp_path, name):
        path = tmp_path / name
        cfg = LedSphereConfig()
        cfg.bubbles.count = 7
        assert ConfigManager(path).save(cfg) is True
        assert ConfigManager(path).load().bubbles.count == 7

    def test_save_refuses_invalid(self, tmp_path):
        path = tmp_path / "saved.yaml"
        cfg = LedSphereConfig()
        cfg.render.brightness = 2.0
        assert ConfigManager(path).save(cfg) is False
        assert not path.exists()
