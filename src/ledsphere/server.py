"""
Entry point: load config, build the scene, start the output worker and
HTTP control surface, then run the render loop until interrupted.
"""

import argparse
import random
import sys
from pathlib import Path
from typing import Optional, Sequence

from .animations import ANIMATIONS, Scene, create_animation
from .config import ConfigManager, LedSphereConfig
from .control import BRIGHTNESS_VAR, ParameterStore
from .error_recovery import GeometryError
from .http_api import start_http_server
from .output import FrameHandoff, OutputWorker, create_output
from .render import RenderLoop
from .sphere.pixels import load_pixel_map


def build_scene(config: LedSphereConfig, control: Optional[ParameterStore] = None) -> Scene:
    """Scene for a config; raises GeometryError when the pixel table is unusable."""
    control = control or ParameterStore()
    control.set_var(BRIGHTNESS_VAR, config.render.brightness)
    rng = random.Random(config.render.seed)
    return Scene(pixels=load_pixel_map(config.sphere), control=control, config=config, rng=rng)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="LED sphere animation engine")
    parser.add_argument("--config", type=Path, default=Path("ledsphere.yaml"),
                        help="Config file, YAML or JSON (default: ledsphere.yaml)")
    parser.add_argument("--animation", choices=sorted(ANIMATIONS),
                        help="Animation to run (overrides config)")
    parser.add_argument("--output", choices=["dotstar", "null"],
                        help="Output backend (overrides config)")
    parser.add_argument("--no-http", action="store_true", help="Do not start the HTTP control surface")
    parser.add_argument("--host", help="HTTP control host (overrides config)")
    parser.add_argument("--port", type=int, help="HTTP control port (overrides config)")
    parser.add_argument("--frames", type=int, default=None, help="Stop after this many frames")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point."""
    args = parse_args(argv)
    config = ConfigManager(args.config).load()
    if args.animation:
        config.render.animation = args.animation
    if args.output:
        config.output.backend = args.output
    if args.host:
        config.control.host = args.host
    if args.port:
        config.control.port = args.port

    try:
        scene = build_scene(config)
        animation = create_animation(config.render.animation, scene)
    except GeometryError as e:
        print(f"[Server] Pixel table unusable: {e}", file=sys.stderr, flush=True)
        return 1
    except ValueError as e:
        print(f"[Server] {e}", file=sys.stderr, flush=True)
        return 1

    print(f"[Server] {len(scene.pixels.active())}/{len(scene.pixels)} pixels active", file=sys.stderr, flush=True)

    handoff = FrameHandoff()
    worker = OutputWorker(handoff, create_output(config.output, len(scene.pixels)))
    worker.start()

    if config.control.enabled and not args.no_http:
        start_http_server(scene.control, config.control.host, config.control.port)

    loop = RenderLoop(scene, animation, handoff.submit)
    try:
        loop.run(max_ticks=args.frames)
    except KeyboardInterrupt:
        print("\n[Server] Interrupted by user", file=sys.stderr, flush=True)
    finally:
        animation.close()
        handoff.close()
        worker.join(timeout=2.0)
    return 0


if __name__ == "__main__":
    sys.exit(main())
