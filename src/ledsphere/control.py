"""
Parameter store - named variables and colors shared with the HTTP surface.

The render loop reads it every frame while HTTP handlers write to it from
another thread, so every get/set takes the one lock. Unknown names read as
0.0 / black instead of raising.
"""

import json
import sys
import threading
from typing import Dict

from .color.colors import BLACK, Color, parse_hex, to_hex

BRIGHTNESS_VAR = "brightness"


class ParameterStore:
    """Thread-safe name -> float and name -> hex color maps."""

    def __init__(self):
        self._vars: Dict[str, float] = {}
        self._colors: Dict[str, str] = {}  # 6 hex digits, no '#'
        self._lock = threading.Lock()

    def get_var(self, name: str) -> float:
        with self._lock:
            return self._vars.get(name, 0.0)

    def set_var(self, name: str, value: float):
        with self._lock:
            self._vars[name] = float(value)

    def get_color(self, name: str) -> Color:
        with self._lock:
            hex_color = self._colors.get(name)
        if hex_color is None:
            return BLACK
        try:
            return parse_hex(hex_color)
        except ValueError as e:
            print(f"[Control] Bad color for {name!r}: #{hex_color} ({e})", file=sys.stderr, flush=True)
            return BLACK

    def set_color(self, name: str, color: Color):
        with self._lock:
            self._colors[name] = to_hex(color)

    def get_color_hex(self, name: str) -> str:
        """6 hex digits without '#', or '' when unset."""
        with self._lock:
            return self._colors.get(name, "")

    def set_color_hex(self, name: str, hex_color: str):
        """Store 6 hex digits; a leading '#' is dropped."""
        with self._lock:
            self._colors[name] = hex_color.strip().lstrip("#")

    def state(self) -> str:
        """JSON snapshot: {"Vars": {...}, "Colors": {...}}."""
        with self._lock:
            return json.dumps({"Vars": dict(self._vars), "Colors": dict(self._colors)})

    def load(self, json_string: str):
        """Merge values from a state() snapshot."""
        data = json.loads(json_string)
        with self._lock:
            for name, value in (data.get("Vars") or {}).items():
                self._vars[name] = float(value)
            for name, value in (data.get("Colors") or {}).items():
                self._colors[name] = str(value).lstrip("#")
