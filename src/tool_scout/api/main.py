"""
FastAPI application for the Tool Scout crawling API.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import JSONResponse
import time
from contextlib import asynccontextmanager

from ..core.config import settings
from ..core.logging import logger
from .routes import crawlers, health, tools
from .exceptions import exception_handlers
from .middleware import add_process_time_header


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager."""
    logger.info(f"Starting {settings.APP_NAME} API ({settings.APP_ENV})")
    if not settings.GEMINI_API_KEY:
        logger.warning("GEMINI_API_KEY is not set, crawls will return without analysis")
    yield
    logger.info(f"Shutting down {settings.APP_NAME} API")


# Create FastAPI application
app = FastAPI(
    title=settings.APP_NAME,
    description="Crawling and Gemini enrichment backend for an AI video tools directory",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add trusted host middleware
app.add_middleware(TrustedHostMiddleware, allowed_hosts=["*"])

# Add custom middleware
app.middleware("http")(add_process_time_header)

for exc_class, handler in exception_handlers.items():
    app.add_exception_handler(exc_class, handler)


# Include routers
app.include_router(
    crawlers.router,
    prefix=f"{settings.API_PREFIX}/admin",
    tags=["crawlers"]
)

app.include_router(
    tools.router,
    prefix=f"{settings.API_PREFIX}/tools",
    tags=["tools"]
)

app.include_router(
    health.router,
    prefix=settings.API_PREFIX,
    tags=["health"]
)


# Health check endpoint
@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": settings.APP_VERSION
    }


# Root endpoint
@app.get("/", tags=["root"])
async def root():
    """Root endpoint with API information."""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "description": "Crawling and Gemini enrichment backend for an AI video tools directory",
        "docs": "/docs",
        "health": "/health"
    }


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error",
            "type": "internal_error"
        }
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tool_scout.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
