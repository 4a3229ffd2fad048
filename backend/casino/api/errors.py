"""Exception handlers - consistent JSON error bodies."""

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from casino.core.errors import CasinoError

logger = structlog.get_logger()


def setup_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(CasinoError)
    async def casino_error_handler(request: Request, exc: CasinoError) -> JSONResponse:
        logger.info(
            "request_rejected",
            path=request.url.path,
            error=type(exc).__name__,
            detail=exc.message,
        )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions, never leaking internals."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})
