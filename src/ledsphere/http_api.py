"""
HTTP control surface for the parameter store.

- GET /health              -> "ok"
- GET /state               -> store snapshot JSON
- GET /var/{name}          -> {"state": "<value * 1000>"}
  GET /var/{name}?state=N  -> sets value N / 1000
- GET /color/{name}        -> {"state": "<rrggbb>"}
  GET /color/{name}?state=rrggbb -> sets the color
PUT behaves like GET with ?state.
"""

import sys
import threading

from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse, Response
from starlette.routing import Route

from .color.colors import parse_hex
from .control import ParameterStore

VAR_SCALE = 1000


def create_app(control: ParameterStore) -> Starlette:
    """Starlette app bound to one parameter store."""

    async def health(request: Request) -> Response:
        return PlainTextResponse("ok\n")

    async def state(request: Request) -> Response:
        return Response(control.state(), media_type="application/json")

    async def var(request: Request) -> Response:
        name = request.path_params["name"]
        new_value = request.query_params.get("state", "")
        if new_value == "":
            return JSONResponse({"state": str(int(control.get_var(name) * VAR_SCALE))})
        try:
            value = int(new_value)
        except ValueError:
            return PlainTextResponse("not a number!", status_code=400)
        control.set_var(name, value / VAR_SCALE)
        print(f"[Control] var {name} = {value}", file=sys.stderr, flush=True)
        return JSONResponse({"state": new_value})

    async def color(request: Request) -> Response:
        name = request.path_params["name"]
        new_value = request.query_params.get("state", "")
        if new_value == "":
            return JSONResponse({"state": control.get_color_hex(name)})
        try:
            parse_hex(new_value)
        except ValueError:
            return PlainTextResponse("not a color!", status_code=400)
        control.set_color_hex(name, new_value)
        print(f"[Control] color {name} = {new_value}", file=sys.stderr, flush=True)
        return JSONResponse({"state": new_value.lstrip("#")})

    return Starlette(routes=[
        Route("/health", health, methods=["GET"]),
        Route("/state", state, methods=["GET"]),
        Route("/var/{name}", var, methods=["GET", "PUT"]),
        Route("/color/{name}", color, methods=["GET", "PUT"]),
    ])


def start_http_server(control: ParameterStore, host: str, port: int) -> threading.Thread:
    """Serve the control surface with uvicorn from a daemon thread."""
    import uvicorn

    server = uvicorn.Server(uvicorn.Config(create_app(control), host=host, port=port, log_level="warning"))

    def _serve():
        try:
            server.run()
        except Exception as e:
            print(f"[Control] HTTP server stopped: {e}", file=sys.stderr, flush=True)

    thread = threading.Thread(target=_serve, name="http-control", daemon=True)
    thread.start()
    print(f"[Control] HTTP control surface on http://{host}:{port}", file=sys.stderr, flush=True)
    return thread
