"""
Render loop - one animation, one frame per tick, forever.

Per tick: step the animation, let it paint the active pixels, submit the
frame and brightness, then clear the pixels so the next tick starts
blank. Submitting may block until the output stage takes the frame.
"""

import math
import sys
import time
from enum import Enum
from typing import Callable, Optional

from .animations.base import Animation, Scene
from .control import BRIGHTNESS_VAR
from .output import RenderFrame


class LoopPhase(Enum):
    IDLE = "idle"
    STEPPING = "stepping"
    COMPOSITING = "compositing"
    SUBMITTING = "submitting"
    RESETTING = "resetting"


class FpsTracker:
    """Average frames per second over each block of `interval` frames."""

    def __init__(self, interval: int = 1000, clock: Callable[[], float] = time.monotonic):
        self.interval = interval
        self._clock = clock
        self._checkpoint = clock()
        self.last_fps: Optional[float] = None

    def tick(self, frame_count: int) -> Optional[float]:
        """Call after frame_count frames are done; returns FPS on interval boundaries."""
        if frame_count == 0 or frame_count % self.interval:
            return None
        now = self._clock()
        span = now - self._checkpoint
        self._checkpoint = now
        self.last_fps = self.interval / span if span > 0 else math.inf
        return self.last_fps


class RenderLoop:
    """Drives one animation and submits each finished frame."""

    def __init__(
        self,
        scene: Scene,
        animation: Animation,
        submit: Callable[[RenderFrame], None],
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.scene = scene
        self.animation = animation
        self._submit = submit
        self._clock = clock
        self._sleep = sleep
        self.phase = LoopPhase.IDLE
        self.frame_count = 0
        self.fps = FpsTracker(scene.config.render.fps_report_interval, clock)
        self._start: Optional[float] = None
        self._running = False

    def brightness(self) -> float:
        value = self.scene.control.get_var(BRIGHTNESS_VAR)
        if math.isnan(value):
            return 0.0
        return max(0.0, min(1.0, value))

    def tick(self):
        if self._start is None:
            self._start = self._clock()
        pixels = self.scene.pixels

        self.phase = LoopPhase.STEPPING
        self.animation.step(self._clock() - self._start, self.frame_count)

        self.phase = LoopPhase.COMPOSITING
        self.animation.composite()

        self.phase = LoopPhase.SUBMITTING
        self._submit(RenderFrame(pixels.colors(), self.brightness(), self.frame_count))

        self.phase = LoopPhase.RESETTING
        pixels.reset()

        self.frame_count += 1
        fps = self.fps.tick(self.frame_count)
        if fps is not None:
            print(f"[Render] Avg FPS for past {self.fps.interval} frames: {fps:.1f}", file=sys.stderr, flush=True)
            line = self.animation.report(self.frame_count)
            if line:
                print(f"[Render] {self.animation.name}: {line}", file=sys.stderr, flush=True)

        if self.animation.frame_delay > 0:
            self._sleep(self.animation.frame_delay)

    def run(self, max_ticks: Optional[int] = None):
        """Tick until stop() or max_ticks frames have been submitted."""
        self._running = True
        print(f"[Render] Starting animation {self.animation.name}", file=sys.stderr, flush=True)
        try:
            while self._running and (max_ticks is None or self.frame_count < max_ticks):
                self.tick()
        finally:
            self._running = False
            self.phase = LoopPhase.IDLE

    def stop(self):
        self._running = False
