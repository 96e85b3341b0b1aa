"""
Pixel geometry - every addressable LED and where it sits on the sphere.

The ball is wired as `rows` rings of `columns` slots, north to south, each
ring wired west to east. Slot order is wire order and never changes.
The two northernmost rings are so short that only every 4th / 2nd slot
carries an LED; the rest are disabled and always emit the background.
"""

import json
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import yaml

from ..color.colors import BLACK, Color
from ..error_recovery import GeometryError
from .geo import Point, normalize, point_from_latlng


@dataclass(eq=False)
class Pixel:
    """One slot of the wire. Only `color` changes after load."""
    row: int
    col: int
    point: Optional[Point] = None
    disabled: bool = False
    color: Optional[Color] = None  # None = unset this frame

    @property
    def active(self) -> bool:
        return not self.disabled and self.point is not None


class PixelMap:
    """Fixed table of pixels in wire order."""

    def __init__(self, pixels: Sequence[Pixel]):
        self._all: List[Pixel] = list(pixels)
        self._active: List[Pixel] = [p for p in self._all if p.active]
        if not self._active:
            raise GeometryError("pixel table has no active pixels")
        self.rows: Dict[int, List[Pixel]] = {}
        self.columns: Dict[int, List[Pixel]] = {}
        for p in self._active:
            self.rows.setdefault(p.row, []).append(p)
            self.columns.setdefault(p.col, []).append(p)

    def __len__(self) -> int:
        return len(self._all)

    def all(self) -> List[Pixel]:
        return self._all

    def active(self) -> List[Pixel]:
        return self._active

    def random_active_pixel(self, rng: Optional[random.Random] = None) -> Pixel:
        return (rng or random).choice(self._active)

    def reset(self):
        """Clear every active pixel back to unset."""
        for p in self._active:
            p.color = None

    def colors(self, background: Color = BLACK) -> List[Color]:
        """One color per slot in wire order; unset and disabled slots get background."""
        return [
            p.color if (p.color is not None and not p.disabled) else background
            for p in self._all
        ]


def _column_stride(row: int) -> int:
    if row == 0:
        return 4
    if row == 1:
        return 2
    return 1


def build_default_layout(
    rows: int = 20,
    columns: int = 64,
    min_visible_latitude: float = -48.75,
) -> List[Pixel]:
    """The ball as built: evenly spaced rings from the north pole down to min_visible_latitude."""
    row_height = (90.0 - min_visible_latitude) / rows
    pixels = []
    for r in range(rows):
        lat = 90.0 - (r + 0.5) * row_height
        stride = _column_stride(r)
        for c in range(columns):
            if c % stride:
                pixels.append(Pixel(row=r, col=c, disabled=True))
                continue
            lng = (c + 0.5) * 360.0 / columns - 180.0
            pixels.append(Pixel(row=r, col=c, point=point_from_latlng(lat, lng)))
    return pixels


def _pixel_from_entry(entry: dict) -> Pixel:
    row, col = int(entry["row"]), int(entry["col"])
    if entry.get("disabled"):
        return Pixel(row=row, col=col, disabled=True)
    if "lat" in entry and "lng" in entry:
        return Pixel(row=row, col=col, point=point_from_latlng(float(entry["lat"]), float(entry["lng"])))
    if all(k in entry for k in ("x", "y", "z")):
        return Pixel(row=row, col=col, point=normalize((float(entry["x"]), float(entry["y"]), float(entry["z"]))))
    return Pixel(row=row, col=col, disabled=True)


def load_layout(path: Path) -> List[Pixel]:
    """Load a pixel table from YAML or JSON.

    The file is a list (or a mapping with a `pixels` list) of entries with
    `row`, `col` and either `lat`/`lng` degrees or `x`/`y`/`z`. Entries with
    `disabled: true` or no coordinates are kept as disabled slots.
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f) if path.suffix in (".yaml", ".yml") else json.load(f)
    except (OSError, ValueError, yaml.YAMLError) as e:
        raise GeometryError(f"cannot read pixel layout {path}: {e}") from e

    if isinstance(data, dict):
        data = data.get("pixels", [])
    if not isinstance(data, list):
        raise GeometryError(f"pixel layout {path} must be a list of entries")

    try:
        return [_pixel_from_entry(entry) for entry in data]
    except (KeyError, TypeError, ValueError) as e:
        raise GeometryError(f"malformed pixel entry in {path}: {e}") from e


def load_pixel_map(sphere_config) -> PixelMap:
    """PixelMap from config: the layout file when set, otherwise the built-in ball."""
    if sphere_config.layout_path:
        return PixelMap(load_layout(Path(sphere_config.layout_path)))
    return PixelMap(build_default_layout(
        sphere_config.rows, sphere_config.columns, sphere_config.min_visible_latitude
    ))
