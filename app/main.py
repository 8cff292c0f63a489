"""
Main FastAPI application entry point.
"""

import logging

from fastapi import FastAPI

from app.config import get_settings
from app.api import router as api_router
from app.logging_config import configure_logging

VERSION = "0.1.0"

settings = get_settings()
configure_logging(settings)

logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.app_name,
    description="Mortgage, affordability, rental ROI and rent vs buy calculators",
    version=VERSION,
    debug=settings.debug,
)

# Include API routes
app.include_router(api_router, prefix="/api")

logger.info(f"{settings.app_name} started in {settings.app_env} mode")


@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring."""
    return {"status": "healthy", "version": VERSION}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.host, port=settings.port)
