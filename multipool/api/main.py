"""FastAPI application for the pool manager.

Note: Authentication and rate limiting are not implemented at the application
level. They belong to the infrastructure in front of the service.
"""

import os

import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from multipool import __version__
from multipool.api.endpoints import router
from multipool.errors import AssetTransferError, PoolManagerError, ShareLedgerError
from multipool.models.api import ErrorResponse
from multipool.safe_int import SafeIntError

logger = structlog.get_logger()

# Configuration from environment variables with sensible defaults
HOST = os.environ.get("MULTIPOOL_HOST", "0.0.0.0")
PORT = int(os.environ.get("MULTIPOOL_PORT", "8000"))
DEBUG = os.environ.get("MULTIPOOL_DEBUG", "false").lower() in ("true", "1", "yes")

# Maximum request body size (64 KB); every request is a handful of fields
MAX_REQUEST_SIZE = 64 * 1024

app = FastAPI(
    title="multipool",
    description="Constant product AMM hosting many token-pair pools",
    version=__version__,
)


@app.middleware("http")
async def limit_request_size(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Reject requests with body larger than MAX_REQUEST_SIZE."""
    content_length = request.headers.get("content-length")
    if content_length and int(content_length) > MAX_REQUEST_SIZE:
        return JSONResponse(status_code=413, content={"detail": "Request too large"})
    return await call_next(request)


def _rejected(exc: Exception) -> JSONResponse:
    body = ErrorResponse(error=type(exc).__name__, detail=str(exc))
    return JSONResponse(status_code=400, content=body.model_dump())


@app.exception_handler(PoolManagerError)
async def pool_error_handler(_request: Request, exc: PoolManagerError) -> JSONResponse:
    return _rejected(exc)


@app.exception_handler(ShareLedgerError)
async def ledger_error_handler(_request: Request, exc: ShareLedgerError) -> JSONResponse:
    return _rejected(exc)


@app.exception_handler(AssetTransferError)
async def transfer_error_handler(_request: Request, exc: AssetTransferError) -> JSONResponse:
    return _rejected(exc)


@app.exception_handler(SafeIntError)
async def arithmetic_error_handler(_request: Request, exc: SafeIntError) -> JSONResponse:
    return _rejected(exc)


@app.exception_handler(ValueError)
async def value_error_handler(_request: Request, exc: ValueError) -> JSONResponse:
    return _rejected(exc)


app.include_router(router)


@app.get("/health")
async def health() -> dict[str, object]:
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


def run() -> None:
    """Run the pool manager API server.

    Configuration via environment variables:
    - MULTIPOOL_HOST: Host to bind to (default: 0.0.0.0)
    - MULTIPOOL_PORT: Port to bind to (default: 8000)
    - MULTIPOOL_DEBUG: Enable debug/reload mode (default: false)
    - MULTIPOOL_POOL_ADDRESS / MULTIPOOL_BURN_ADDRESS: see PoolManagerConfig.from_env
    """
    logger.info("starting_api", host=HOST, port=PORT, debug=DEBUG)
    uvicorn.run(
        "multipool.api.main:app",
        host=HOST,
        port=PORT,
        reload=DEBUG,
    )


if __name__ == "__main__":
    run()
