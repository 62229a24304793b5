from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence, Union

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from jinja2 import TemplateError

from common.logging_setup import get_logger, setup_logging
from common.types import Config
from gastrak.config import load_config, parse_args
from gastrak.context import build_context
from gastrak.snapshot import SnapshotError, read_snapshot

log = get_logger(__name__)

INDEX_TEMPLATE = "index"


def _template_file(name: str) -> str:
    return f"{name}.html"


def create_app(
    config: Config,
    static_dir: Union[str, Path] = "static",
    templates_dir: Union[str, Path] = "templates",
) -> FastAPI:
    """
    Build the application: `GET /` renders the `index` template, `/static`
    serves `static_dir` as-is, every other path is a 404.

    `config` is stored on `app.state.config` and only ever read by handlers.
    Raises RuntimeError if `static_dir` does not exist.
    """
    app = FastAPI(title="Gastrak", version="1.0.0", docs_url=None, redoc_url=None, openapi_url=None)
    app.state.config = config

    templates = Jinja2Templates(directory=str(templates_dir))
    app.mount("/static", StaticFiles(directory=str(static_dir)), name="static")

    # Sync handler: runs in the worker thread pool, one call per request.
    @app.api_route("/", methods=["GET", "HEAD"], response_class=HTMLResponse)
    def index(request: Request) -> Response:
        cfg: Config = request.app.state.config
        try:
            snap = read_snapshot(cfg.data_path)
        except SnapshotError as e:
            log.error("failed to read current data: %s", e, extra={"extra": {"path": str(e.path)}})
            return JSONResponse({"error": "data_unavailable", "detail": str(e)}, status_code=500)

        ctx = build_context(cfg, snap)
        try:
            # Rendering completes here, before anything is sent.
            return templates.TemplateResponse(request, _template_file(INDEX_TEMPLATE), ctx.to_dict())
        except TemplateError as e:
            log.exception("failed to render template %r", INDEX_TEMPLATE, extra={"extra": {"templates": str(templates_dir)}})
            return JSONResponse({"error": "render_failed", "detail": str(e)}, status_code=500)

    return app


def run(config: Config, **app_kwargs) -> None:
    """Serve until the process is terminated. Bind errors make uvicorn exit non-zero."""
    app = create_app(config, **app_kwargs)
    log.info("serving on %s:%d (data=%s)", config.host, config.port, config.data_path)
    # log_config=None keeps uvicorn's records on our JSON root handler
    uvicorn.run(app, host=config.host, port=config.port, log_config=None)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    setup_logging(args.log_level, force=True)
    config = load_config(args)
    if not Path(config.data_path).is_file():
        log.warning("data file %s not found; GET / will fail until it exists", config.data_path)
    run(config)


# -------- local dev entrypoint --------
if __name__ == "__main__":
    main()
