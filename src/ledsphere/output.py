"""
Device output stage - gets finished frames onto the LED strip.

The render loop hands frames over through FrameHandoff, a single slot:
if the strip is still busy with the previous frame the loop blocks. No
frames are queued up or dropped.

Hardware trouble stays in here. DotStarOutput retries, backs off through
a circuit breaker and reconnects, but never raises into the render loop.
"""

import queue
import sys
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import timedelta
from typing import List, Optional, Sequence

from .color.colors import Color, to_rgb255
from .error_recovery import CircuitBreaker, CircuitOpenError, RetryConfig, retry_with_backoff

try:
    import board
    import adafruit_dotstar
    HAS_DOTSTAR = True
except ImportError:
    HAS_DOTSTAR = False
    board = None
    adafruit_dotstar = None


@dataclass(frozen=True)
class RenderFrame:
    """One color per slot in wire order, plus brightness. Used once."""
    colors: Sequence[Color]
    brightness: float
    frame_count: int = 0


class OutputStage(ABC):
    """Something that can show a frame."""

    name = "output"

    @abstractmethod
    def render(self, colors: Sequence[Color], brightness: float):
        """Show colors scaled by brightness. Must not raise."""

    def close(self):
        pass


class NullOutput(OutputStage):
    """No hardware: counts frames and keeps the last one."""

    name = "null"

    def __init__(self):
        self.frames_rendered = 0
        self.last_frame: Optional[List[tuple]] = None

    def render(self, colors: Sequence[Color], brightness: float):
        self.last_frame = [to_rgb255(c, brightness) for c in colors]
        self.frames_rendered += 1


class DotStarOutput(OutputStage):
    """APA102 strip on the hardware SPI pins."""

    name = "dotstar"

    def __init__(
        self,
        num_pixels: int,
        retry: Optional[RetryConfig] = None,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.num_pixels = num_pixels
        self._retry = retry or RetryConfig(max_attempts=3, initial_delay=0.1, max_delay=2.0)
        self._breaker = breaker or CircuitBreaker(failure_threshold=5, timeout=timedelta(seconds=10))
        self._dots = None
        self.frames_rendered = 0
        self.frames_failed = 0
        self.reconnects = 0
        if not HAS_DOTSTAR:
            print("[Output] DotStar library not available, frames will be discarded", file=sys.stderr, flush=True)

    @classmethod
    def from_config(cls, output_config, num_pixels: int) -> "DotStarOutput":
        return cls(
            num_pixels,
            retry=RetryConfig(
                max_attempts=output_config.retry_attempts,
                initial_delay=output_config.retry_initial_delay,
                max_delay=output_config.retry_max_delay,
            ),
            breaker=CircuitBreaker(
                failure_threshold=output_config.breaker_threshold,
                timeout=timedelta(seconds=output_config.breaker_timeout),
            ),
        )

    def _connect(self):
        self._dots = adafruit_dotstar.DotStar(
            board.SCK, board.MOSI, self.num_pixels,
            brightness=1.0, auto_write=False,
        )
        self.reconnects += 1
        print(f"[Output] DotStar strip connected ({self.num_pixels} pixels)", file=sys.stderr, flush=True)

    def _write(self, colors: Sequence[Color], brightness: float):
        if self._dots is None:
            self._connect()
        try:
            for i, c in enumerate(colors[:self.num_pixels]):
                self._dots[i] = to_rgb255(c, brightness)
            self._dots.show()
        except Exception:
            self._dots = None  # reconnect on the next attempt
            raise

    def render(self, colors: Sequence[Color], brightness: float):
        if not HAS_DOTSTAR:
            return
        try:
            self._breaker.call(lambda: retry_with_backoff(lambda: self._write(colors, brightness), self._retry))
            self.frames_rendered += 1
        except CircuitOpenError:
            self.frames_failed += 1
        except Exception as e:
            self.frames_failed += 1
            if self.frames_failed % 50 == 1:
                print(f"[Output] Frame skipped ({self.frames_failed} so far): {e}", file=sys.stderr, flush=True)

    def close(self):
        if self._dots is not None:
            try:
                self._dots.fill((0, 0, 0))
                self._dots.show()
                self._dots.deinit()
            except Exception as e:
                print(f"[Output] Error clearing strip: {e}", file=sys.stderr, flush=True)
            self._dots = None


def create_output(output_config, num_pixels: int) -> OutputStage:
    if output_config.backend == "null":
        return NullOutput()
    return DotStarOutput.from_config(output_config, num_pixels)


class FrameHandoff:
    """Single-slot exchange between the render loop and the output worker."""

    def __init__(self):
        self._slot: "queue.Queue[Optional[RenderFrame]]" = queue.Queue(maxsize=1)

    def submit(self, frame: RenderFrame):
        """Blocks while the previous frame has not been taken."""
        self._slot.put(frame)

    def take(self, timeout: Optional[float] = None) -> Optional[RenderFrame]:
        return self._slot.get(timeout=timeout)

    def close(self):
        """Wake the worker with a stop marker."""
        self._slot.put(None)


class OutputWorker(threading.Thread):
    """Pulls frames off the handoff and renders them until closed."""

    def __init__(self, handoff: FrameHandoff, stage: OutputStage):
        super().__init__(name="output", daemon=True)
        self.handoff = handoff
        self.stage = stage

    def run(self):
        while True:
            frame = self.handoff.take()
            if frame is None:
                break
            self.stage.render(frame.colors, frame.brightness)
        self.stage.close()
