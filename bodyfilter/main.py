"""FastAPI entrypoint for the body binding service."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from bodyfilter.config import AppConfig, load_config
from bodyfilter.encoder import JsonBodyResponse
from bodyfilter.errors import BindingError, error_response, status_for, success_response
from bodyfilter.logging_setup import configure_logging
from bodyfilter.models import RootResource

logger = logging.getLogger(__name__)

API_ROOT_PATH = "/api"


def create_app(config: AppConfig | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if getattr(app.state, "config", None) is None:
            app.state.config = load_config()
        configure_logging(app.state.config.log_level, app.state.config.log_json)
        yield

    app = FastAPI(lifespan=lifespan)
    app.state.config = config

    @app.exception_handler(BindingError)
    def handle_binding_error(request: Request, exc: BindingError) -> JSONResponse:
        status = status_for(exc)
        log = logger.error if status >= 500 else logger.warning
        log(
            "Request body binding failed",
            extra={
                "context": {
                    "path": request.url.path,
                    "code": exc.error.code,
                    "details": exc.error.details,
                }
            },
        )
        return JSONResponse(status_code=status, content=error_response(exc.error))

    @app.get("/health", status_code=200)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get(API_ROOT_PATH, response_class=JsonBodyResponse)
    def api_root(request: Request) -> JsonBodyResponse:
        api_version = request.app.state.config.api_version
        root = RootResource(
            api_version=api_version,
            links={"Self": API_ROOT_PATH, "Health": "/health"},
        )
        return JsonBodyResponse(success_response(root))

    return app


app = create_app()
