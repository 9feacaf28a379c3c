"""FastAPI application main module.

This module defines the main FastAPI application instance and core API endpoints
for the CartRec suggestion service. It provides health check and metrics
endpoints and serves as the entry point for the API server.
"""

import logging
from typing import Dict

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cartrec import __version__
from cartrec.api.exceptions import CartRecException
from cartrec.api.logging_config import RequestLoggingMiddleware, setup_logging
from cartrec.api.metrics import metrics_service
from cartrec.api.routes import suggestions
from cartrec.config import load_settings

settings = load_settings()
setup_logging(settings.log_level)

logger = logging.getLogger(__name__)

# Create FastAPI application instance
app = FastAPI(
    title="CartRec API",
    description="Cart-based product suggestion service",
    version=__version__,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers
app.include_router(suggestions.router)


@app.exception_handler(CartRecException)
async def cartrec_exception_handler(request: Request, exc: CartRecException) -> JSONResponse:
    """Render CartRec errors with an empty suggestion list.

    Clients always receive the same shape as a successful response, plus
    the error type and details.
    """
    logger.warning(
        exc.message,
        extra={
            "path": str(request.url.path),
            "status_code": exc.status_code,
            "error_type": type(exc).__name__,
        },
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "message": exc.message,
            "suggestions": [],
            "error_type": type(exc).__name__,
            "details": exc.details,
        },
    )


@app.get("/ping")
def ping() -> Dict[str, str]:
    """Health check endpoint.

    Returns a simple status response to verify the API is running.

    Returns:
        Dictionary with status key set to "ok".

    Example:
        >>> response = client.get("/ping")
        >>> assert response.json() == {"status": "ok"}
    """
    return {"status": "ok"}


@app.get("/metrics")
def metrics() -> Dict:
    """Request counters and latency statistics for the suggestion endpoint."""
    return metrics_service.get_metrics()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "cartrec.api.main:app",
        host="0.0.0.0",
        port=3939,
        reload=True,
    )
