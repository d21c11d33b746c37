"""
FastAPI Application: The Pitch Plot API Server.

Serves screenshot extraction, movement-plot data and Excel export.
Every failure leaves the server as `{"error": "<message>"}`.
"""

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from pitchplot.config import SystemConfig
from pitchplot.errors import PitchPlotError

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Pitch Plot API",
    description="Pitch-table screenshots to movement profiles",
    version="0.1.0",
)

# Permissive CORS: the browser app may be served from anywhere
app.add_middleware(
    CORSMiddleware,
    allow_origins=SystemConfig.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["content-type"],
)


# ---------------------------------------------------------------------------
# Exception handlers: one stable {status, error} pair per failure class
# ---------------------------------------------------------------------------
@app.exception_handler(PitchPlotError)
async def _pipeline_error_handler(request: Request, exc: PitchPlotError):
    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def _http_error_handler(request: Request, exc: StarletteHTTPException):
    message = "Method not allowed" if exc.status_code == 405 else str(exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"error": message}, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def _validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = f"{field}: {first.get('msg', 'invalid value')}" if field else first.get("msg", "Invalid request")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.method} {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Failed to process image"})


@app.on_event("startup")
async def startup():
    """Wire the extraction pipeline into the routes."""
    from pitchplot.pipeline import PitchPipeline
    from pitchplot.api.routes import pitches

    logger.info("Initializing Pitch Plot API...")
    if pitches._pipeline is None:
        pitches.set_pipeline(PitchPipeline())
    logger.info("Pitch Plot API ready.")


# Register routes
from pitchplot.api.routes import pitches, export  # noqa: E402

app.include_router(pitches.router)
app.include_router(export.router)


@app.get("/health")
async def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    uvicorn.run(
        "pitchplot.api.main:app",
        host=SystemConfig.API_HOST,
        port=SystemConfig.API_PORT,
        reload=os.getenv("PITCHPLOT_DEV", "").lower() in ("1", "true"),
    )
