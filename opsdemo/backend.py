import platform
import random
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from opsdemo.config import BackendSettings
from opsdemo.web import apply_cors_headers, raw_path, serve
from opsdemo.data import count_errors, generate_items, parse_count, utc_timestamp
from opsdemo.logging import configure_logging, get_logger
from opsdemo.metrics import RequestStats

SERVICE = "backend"
VERSION = "1.0.0"

AVAILABLE_ENDPOINTS = [
    "/api/health",
    "/api/metadata",
    "/api/status",
    "/api/echo?message=test",
    "/api/data?count=10",
    "/api/db-test",
]

log = get_logger(SERVICE)


def create_app(settings: BackendSettings | None = None, rng: random.Random | None = None) -> FastAPI:
    settings = settings or BackendSettings()
    stats = RequestStats(SERVICE)
    rng = rng or random.Random()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        log.info("listening", url=f"http://{settings.host}:{settings.port}")
        log.info("environment", environment=settings.environment)
        log.info("sql configured", sql_configured=settings.sql_configured)
        yield
        log.info("shutting down gracefully", requests=stats.request_count)

    app = FastAPI(title="Troubleshooting Demo Backend", version=VERSION, lifespan=lifespan, redirect_slashes=False)
    app.state.settings = settings
    app.state.stats = stats

    @app.middleware("http")
    async def count_requests(request: Request, call_next):
        number = stats.record_request()
        log.info("request", method=request.method, path=request.url.path, request_number=number)
        t0 = time.perf_counter()
        if request.method == "OPTIONS":
            response = Response(status_code=200)
        else:
            response = await call_next(request)
        stats.observe(request.method, response.status_code, time.perf_counter() - t0)
        return apply_cors_headers(response)

    @app.exception_handler(StarletteHTTPException)
    async def not_found(request: Request, exc: StarletteHTTPException):
        # Unknown path and known path with the wrong method are both a miss.
        if exc.status_code not in (404, 405):
            return await http_exception_handler(request, exc)
        stats.record_errors(1, kind="not_found")
        log.warning("not found", method=request.method, path=raw_path(request))
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "path": raw_path(request),
                "availableEndpoints": AVAILABLE_ENDPOINTS,
            },
        )

    @app.get("/api/health")
    def health():
        requests, errors = stats.snapshot()
        return {
            "status": "healthy",
            "service": SERVICE,
            "timestamp": utc_timestamp(),
            "uptime": stats.uptime(),
            "environment": settings.environment,
            "requestCount": requests,
            "errorCount": errors,
        }

    @app.get("/api/metadata")
    def metadata():
        return {
            "service": SERVICE,
            "version": VERSION,
            "environment": settings.environment,
            "appInsightsKey": settings.client_id,
            "sqlConfigured": settings.sql_configured,
            "timestamp": utc_timestamp(),
        }

    @app.get("/api/status")
    def status():
        requests, errors = stats.snapshot()
        return {
            "status": "operational",
            "service": "backend-api",
            "timestamp": utc_timestamp(),
            "uptime": stats.uptime(),
            "requestCount": requests,
            "errorCount": errors,
            "metrics": {
                "environment": settings.environment,
                "node_version": platform.python_version(),
            },
        }

    @app.get("/api/echo")
    def echo(request: Request):
        query = {}
        for key in request.query_params.keys():
            values = request.query_params.getlist(key)
            query[key] = values if len(values) > 1 else values[0]
        return {
            "message": "Echo response from backend",
            "query": query,
            "timestamp": utc_timestamp(),
        }

    @app.get("/api/data")
    def data(request: Request):
        # Malformed count degrades to 0 items instead of a 400.
        counts = request.query_params.getlist("count")
        count = parse_count(counts[0] if counts else None)
        items = generate_items(count, error_rate=settings.data_error_rate, rng=rng)
        errors = count_errors(items)
        stats.record_errors(errors, kind="data_item")
        return {"items": items, "count": len(items), "errors": errors}

    @app.get("/api/db-test")
    def db_test():
        configured = settings.sql_configured
        return {
            "status": "db_test",
            "configured": configured,
            "message": "SQL connection string is configured"
            if configured
            else "SQL connection string not configured",
            "timestamp": utc_timestamp(),
        }

    @app.get("/metrics")
    def metrics():
        return Response(generate_latest(stats.registry), media_type=CONTENT_TYPE_LATEST)

    return app


app = create_app()


def run() -> None:
    settings = app.state.settings
    serve(app, settings.host, settings.port, settings.log_level)


if __name__ == "__main__":
    run()
