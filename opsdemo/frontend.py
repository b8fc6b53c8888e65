from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import HTMLResponse, JSONResponse
from jinja2 import Environment, FileSystemLoader, select_autoescape
from starlette.exceptions import HTTPException as StarletteHTTPException

from opsdemo.config import FrontendSettings
from opsdemo.web import apply_cors_headers, no_query, raw_target, serve
from opsdemo.logging import configure_logging, get_logger

SERVICE = "frontend"
TEMPLATES = Path(__file__).parent / "templates"

log = get_logger(SERVICE)


def render_index(settings: FrontendSettings) -> str:
    env = Environment(loader=FileSystemLoader(TEMPLATES), autoescape=select_autoescape(["html"]))
    return env.get_template("index.html").render(port=settings.port, api_url=settings.api_url)


def create_app(settings: FrontendSettings | None = None) -> FastAPI:
    settings = settings or FrontendSettings()
    # Backend URL is fixed for the life of the process.
    page = render_index(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.log_level)
        log.info("listening", url=f"http://{settings.host}:{settings.port}")
        log.info("backend api", api_url=settings.api_url)
        yield
        log.info("shutting down gracefully")

    app = FastAPI(title="Troubleshooting Demo Frontend", lifespan=lifespan, redirect_slashes=False)
    app.state.settings = settings

    @app.middleware("http")
    async def cors(request: Request, call_next):
        return apply_cors_headers(await call_next(request))

    @app.exception_handler(StarletteHTTPException)
    async def not_found(request: Request, exc: StarletteHTTPException):
        if exc.status_code not in (404, 405):
            return await http_exception_handler(request, exc)
        # Routes match the whole request target, so "path" carries the query too.
        return JSONResponse(status_code=404, content={"error": "Not Found", "path": raw_target(request)})

    @app.get("/health", dependencies=[Depends(no_query)])
    def health():
        return {"status": "healthy", "service": SERVICE}

    @app.get("/", response_class=HTMLResponse, dependencies=[Depends(no_query)])
    def index():
        return HTMLResponse(page)

    return app


app = create_app()


def run() -> None:
    settings = app.state.settings
    serve(app, settings.host, settings.port, settings.log_level)


if __name__ == "__main__":
    run()
