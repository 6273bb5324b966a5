"""
Incident Report Service - Main Application

FastAPI application for the co-parenting incident report wizard.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from incident_report_service.config.settings import settings
from incident_report_service.api.routes.incident import router as incident_router
from incident_report_service.core.session_factory import close_incident_session, get_incident_session

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info(f"Starting {settings.service_name} ({settings.environment})")
    logger.info(f"Report model: {settings.gemini_model}")
    get_incident_session()

    yield

    # Shutdown
    logger.info("Shutting down Incident Report Service")
    await close_incident_session()


# Create FastAPI app
app = FastAPI(
    title="Incident Report Service",
    description="Step-by-step co-parenting incident documentation with AI-assisted reports and PDF export",
    version="0.1.0",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(incident_router)


# Root endpoint
@app.get(
    "/",
    summary="Service Information",
    description="""
Returns basic information about the Incident Report Service.

**Response Example**:
```json
{
  "service": "incident-report-service",
  "version": "0.1.0",
  "status": "running",
  "environment": "production"
}
```

**Authorization**: None required (public endpoint)
    """,
    responses={
        200: {"description": "Service information returned successfully"}
    }
)
async def root():
    """Root endpoint"""
    return {
        "service": settings.service_name,
        "version": "0.1.0",
        "status": "running",
        "environment": settings.environment
    }


# Health endpoint (simple version at root level)
@app.get(
    "/health",
    summary="Health Check",
    description="""
Returns the health status of the Incident Report Service.

**Storage**: No storage query (lightweight check)

**Note**: For a check that includes evidence storage, use `/api/v1/incident/health`.
    """,
    responses={
        200: {"description": "Service is healthy and operational"}
    }
)
async def health():
    """Simple health check"""
    return {"status": "healthy", "service": settings.service_name}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "incident_report_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=True if settings.environment == "development" else False
    )
