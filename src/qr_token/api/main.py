"""FastAPI application for the QR token service."""

from fastapi import FastAPI

from qr_token import __version__
from qr_token.api.routes import router
from qr_token.config import settings
from qr_token.logging_config import configure_logging

# Configure logging at module level
configure_logging(log_level=settings.log_level, format_as_json=settings.log_json)


app = FastAPI(
    title="QR Token Service",
    description="Issues and validates AES-256-GCM encrypted QR access tokens",
    version=__version__,
    docs_url="/docs" if settings.debug else None,
    redoc_url="/redoc" if settings.debug else None,
)

app.include_router(router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": settings.service_name}


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": settings.service_name,
        "version": __version__,
        "environment": settings.environment,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "qr_token.api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )
