"""FastAPI application entry point."""
from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.api.routes import router
from app.errors import AnalyzerError


logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(funcName)-15s | %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
        format=LOG_FORMAT,
        datefmt="%Y-%m-%d %H:%M:%S",
    )


async def analyzer_error_handler(request: Request, exc: AnalyzerError) -> JSONResponse:
    logger.error(
        "%s on %s: %s",
        exc.code,
        request.url.path,
        exc.message,
        exc_info=exc.__cause__ is not None,
        extra={"error_code": exc.code, "details": exc.details},
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": exc.public_message},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def create_app() -> FastAPI:
    configure_logging()
    app = FastAPI(title="Startup Idea Analyzer")
    app.include_router(router, prefix="/api")
    app.add_exception_handler(AnalyzerError, analyzer_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    return app


app = create_app()
