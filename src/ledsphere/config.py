"""
Configuration - how the sphere is laid out, animated and driven.

Every section is a dataclass with working defaults, so a missing config
file simply means "run the stock sphere". Files may be YAML or JSON,
chosen by suffix.
"""

import json
import math
import sys
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml


# Approximate solid angle covered by one pixel: 4 * pi over ~1000 pixels
AREA_PER_PIXEL = 4 * math.pi / 1000.0

KNOWN_BACKENDS = ("dotstar", "null")


@dataclass
class SphereConfig:
    """Physical layout of the pixel ball."""
    rows: int = 20
    columns: int = 64
    min_visible_latitude: float = -48.75  # Nothing south of here has pixels
    layout_path: Optional[str] = None     # Optional pixel table overriding the built-in one


@dataclass
class RenderConfig:
    """Render loop settings."""
    animation: str = "opensimplex"
    brightness: float = 1.0
    fps_report_interval: int = 1000  # ticks
    workers: int = 0                 # thread pool size for noise fan-out, 0 = serial
    seed: Optional[int] = None


@dataclass
class NoiseConfig:
    """OpenSimplex animation tuning."""
    spread: float = 1.92      # Lines up the percentile buckets of the normalized output
    time_scale: float = 0.1   # noise t = elapsed seconds * time_scale
    histogram_samples_per_pixel: int = 10000
    report_histogram: bool = False


@dataclass
class BubbleConfig:
    """Growth-and-pop animation tuning."""
    count: int = 15
    growth: float = 0.005            # radians added to each cap per tick
    spawn_area: float = AREA_PER_PIXEL
    max_area: float = math.pi        # steradians; a quarter of the sphere
    separation_factor: float = 3.0   # new centers keep this many radii away
    max_spawn_attempts: int = 100


@dataclass
class MoverConfig:
    """Directed movement animation tuning."""
    count: int = 20
    area: float = AREA_PER_PIXEL * 4
    min_speed: float = 500.0       # km per tick
    max_speed: float = 1000.0
    min_distance: float = 20000.0  # km travelled before respawn
    max_distance: float = 120000.0
    tail_length: int = 0
    frame_delay: float = 0.05      # seconds slept after each frame


@dataclass
class OutputConfig:
    """Device output stage."""
    backend: str = "dotstar"
    retry_attempts: int = 3
    retry_initial_delay: float = 0.1
    retry_max_delay: float = 2.0
    breaker_threshold: int = 5
    breaker_timeout: float = 10.0  # seconds before a reconnect attempt


@dataclass
class ControlConfig:
    """HTTP control surface."""
    enabled: bool = True
    host: str = "0.0.0.0"
    port: int = 4000


@dataclass
class LedSphereConfig:
    """Complete configuration for ledsphere."""
    sphere: SphereConfig = field(default_factory=SphereConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    noise: NoiseConfig = field(default_factory=NoiseConfig)
    bubbles: BubbleConfig = field(default_factory=BubbleConfig)
    movers: MoverConfig = field(default_factory=MoverConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    control: ControlConfig = field(default_factory=ControlConfig)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LedSphereConfig":
        data = data or {}
        if not isinstance(data, dict):
            raise ValueError(f"config root must be a mapping, got {type(data).__name__}")
        # An empty section ("sphere:" with nothing under it) loads as None
        return cls(
            sphere=SphereConfig(**(data.get("sphere") or {})),
            render=RenderConfig(**(data.get("render") or {})),
            noise=NoiseConfig(**(data.get("noise") or {})),
            bubbles=BubbleConfig(**(data.get("bubbles") or {})),
            movers=MoverConfig(**(data.get("movers") or {})),
            output=OutputConfig(**(data.get("output") or {})),
            control=ControlConfig(**(data.get("control") or {})),
        )

    def validate(self) -> Tuple[bool, Optional[str]]:
        """Validate configuration values are sensible."""
        if self.sphere.rows <= 0 or self.sphere.columns <= 0:
            return False, "sphere rows and columns must be positive"
        if not (-90.0 <= self.sphere.min_visible_latitude < 90.0):
            return False, "min_visible_latitude must be in [-90, 90)"

        if not (0.0 <= self.render.brightness <= 1.0):
            return False, "brightness must be 0-1"
        if self.render.fps_report_interval <= 0:
            return False, "fps_report_interval must be positive"
        if self.render.workers < 0:
            return False, "workers must be >= 0"

        if self.noise.spread <= 0:
            return False, "noise spread must be positive"
        if self.noise.histogram_samples_per_pixel <= 0:
            return False, "histogram_samples_per_pixel must be positive"

        if self.bubbles.count < 0 or self.movers.count < 0:
            return False, "bubble and mover counts must be >= 0"
        if self.bubbles.growth < 0:
            return False, "bubble growth must be >= 0"
        if not (0 < self.bubbles.spawn_area <= self.bubbles.max_area <= 4 * math.pi):
            return False, "bubble areas must satisfy 0 < spawn_area <= max_area <= 4*pi"
        if self.bubbles.separation_factor < 0:
            return False, "separation_factor must be >= 0"
        if self.bubbles.max_spawn_attempts < 1:
            return False, "max_spawn_attempts must be >= 1"

        if not (0 < self.movers.min_speed <= self.movers.max_speed):
            return False, "mover speed range must satisfy 0 < min_speed <= max_speed"
        if not (0 < self.movers.min_distance <= self.movers.max_distance):
            return False, "mover distance range must satisfy 0 < min_distance <= max_distance"
        if self.movers.tail_length < 0:
            return False, "tail_length must be >= 0"

        if self.output.backend not in KNOWN_BACKENDS:
            return False, f"output backend must be one of {', '.join(KNOWN_BACKENDS)}"
        if self.output.retry_attempts < 1:
            return False, "retry_attempts must be >= 1"

        if not (0 < self.control.port < 65536):
            return False, "control port must be 1-65535"

        return True, None


class ConfigManager:
    """Manages configuration loading and saving."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Args:
            config_path: Path to config file (default: ledsphere.yaml in current dir)
        """
        if config_path is None:
            config_path = Path("ledsphere.yaml")
        self.config_path = Path(config_path)
        self._config: Optional[LedSphereConfig] = None

    def _is_yaml(self) -> bool:
        return self.config_path.suffix in (".yaml", ".yml")

    def load(self, force_reload: bool = False) -> LedSphereConfig:
        """Load configuration from file or return defaults."""
        if self._config is not None and not force_reload:
            return self._config

        if self.config_path.exists():
            try:
                with open(self.config_path, "r") as f:
                    data = yaml.safe_load(f) if self._is_yaml() else json.load(f)

                self._config = LedSphereConfig.from_dict(data)

                valid, error = self._config.validate()
                if not valid:
                    print(f"[Config] Warning: Invalid config, using defaults: {error}", file=sys.stderr, flush=True)
                    self._config = LedSphereConfig()
            except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
                print(f"[Config] Error loading config, using defaults: {e}", file=sys.stderr, flush=True)
                self._config = LedSphereConfig()
        else:
            self._config = LedSphereConfig()

        return self._config

    def save(self, config: Optional[LedSphereConfig] = None) -> bool:
        """Save configuration to file. Returns True if saved."""
        if config is None:
            config = self._config or self.load()

        valid, error = config.validate()
        if not valid:
            print(f"[Config] Cannot save invalid config: {error}", file=sys.stderr, flush=True)
            return False

        try:
            data = config.to_dict()
            with open(self.config_path, "w") as f:
                if self._is_yaml():
                    yaml.dump(data, f, default_flow_style=False, sort_keys=False)
                else:
                    json.dump(data, f, indent=2)
            self._config = config
            return True
        except OSError as e:
            print(f"[Config] Error saving config: {e}", file=sys.stderr, flush=True)
            return False

    def reload(self) -> LedSphereConfig:
        """Force reload configuration from file."""
        self._config = None
        return self.load()
