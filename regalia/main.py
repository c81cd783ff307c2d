"""
Main FastAPI application
"""

from fastapi import FastAPI

from regalia.core.config import settings
from regalia.core.events import lifespan
from regalia.core.middleware import setup_middleware
from regalia.api.v1 import api_router
from regalia.api.health import router as health_router

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Regalia catalogue API - product filtering and faceted search",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Setup middleware
setup_middleware(app)

# Include API routes
app.include_router(api_router, prefix="/api/v1")
app.include_router(health_router, tags=["Health"])

# Root endpoint
@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "docs": "/api/docs",
        "health": "/health"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "regalia.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=settings.WORKERS
    )
