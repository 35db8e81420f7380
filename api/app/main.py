"""Portfolio Analytics API - Main Application."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core.trading_types import ValidationError, WorkerPoolFullError

from .core.config import settings
from .routes import analysis_router, simulation_router
from .schemas.common import ErrorDetail, ErrorResponse
from .services.simulation_service import simulation_service

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting Portfolio Analytics API")
    logger.info(f"Project root: {settings.PROJECT_ROOT}")

    yield

    # Shutdown
    logger.info("Shutting down Portfolio Analytics API")
    simulation_service.shutdown()


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.VERSION,
    description="REST API for trading system performance, quality and robustness analytics",
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    body = ErrorResponse(error=ErrorDetail(code=code, message=message))
    return JSONResponse(status_code=status_code, content=body.model_dump())


@app.exception_handler(ValidationError)
async def validation_exception_handler(request: Request, exc: ValidationError):
    """Reject requests the engine cannot work with."""
    logger.warning(f"Rejected request {request.url.path}: {exc}")
    return error_response(422, "UNPROCESSABLE_ENTITY", str(exc))


@app.exception_handler(RequestValidationError)
async def request_validation_exception_handler(request: Request, exc: RequestValidationError):
    """Reject malformed request bodies with the standard error envelope."""
    messages = [f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()]
    return error_response(422, "VALIDATION_ERROR", "; ".join(messages))


@app.exception_handler(WorkerPoolFullError)
async def worker_pool_full_exception_handler(request: Request, exc: WorkerPoolFullError):
    """Too many simulations waiting."""
    logger.warning(f"Simulation queue full: {exc}")
    return error_response(503, "SERVICE_UNAVAILABLE", str(exc))


# Exception handler for generic errors
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Handle uncaught exceptions."""
    logger.exception(f"Unhandled exception: {exc}")
    return error_response(500, "INTERNAL_ERROR", str(exc) if settings.DEBUG else "Internal server error")


# Include routers
app.include_router(analysis_router, prefix=settings.API_V1_PREFIX)
app.include_router(simulation_router, prefix=settings.API_V1_PREFIX)


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/docs",
        "api": settings.API_V1_PREFIX,
    }


@app.get("/health")
async def health():
    """Health check."""
    return {"status": "healthy", "version": settings.VERSION}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
