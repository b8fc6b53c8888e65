import signal
import sys

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from starlette.responses import Response

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


def apply_cors_headers(response: Response) -> Response:
    # Sent on every response, not only on preflight.
    for name, value in CORS_HEADERS.items():
        response.headers[name] = value
    return response


def raw_path(request: Request) -> str:
    """Request path exactly as sent, percent-encoding intact, without the query."""
    raw = request.scope.get("raw_path")
    if raw is None:
        return request.url.path
    return raw.decode("latin-1")


def raw_target(request: Request) -> str:
    """Raw path plus the raw query string, as it appeared on the request line."""
    query = request.scope.get("query_string", b"")
    if query:
        return f"{raw_path(request)}?{query.decode('latin-1')}"
    return raw_path(request)


def no_query(request: Request) -> None:
    """Route dependency: the route only matches its bare path."""
    if request.scope.get("query_string"):
        raise HTTPException(status_code=404)


def _exit_cleanly(signum, frame):
    sys.exit(0)


def serve(app: FastAPI, host: str, port: int, log_level: str) -> None:
    """Run ``app`` under uvicorn until SIGTERM/SIGINT, then exit 0.

    uvicorn drains in-flight requests, restores these handlers and re-raises
    the captured signal, which lands in ``_exit_cleanly``.
    """
    for sig in (signal.SIGTERM, signal.SIGINT):
        signal.signal(sig, _exit_cleanly)
    server = uvicorn.Server(uvicorn.Config(app, host=host, port=port, log_level=log_level.lower()))
    server.run()
