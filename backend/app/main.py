"""
Check Assessment Engine - FastAPI Application Entry Point
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api.v1.endpoints import check_types, checks, health
from app.logger import logger
from app.services.checks.catalog import get_catalog

# Create app
app = FastAPI(
    title=settings.APP_NAME,
    description="Check-type configuration and outcome assessment for identity verification and AML screening",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/api/v1")
app.include_router(check_types.router, prefix="/api/v1/check-types")
app.include_router(checks.router, prefix="/api/v1/checks")


@app.on_event("startup")
async def startup():
    """Load check type configuration on startup."""
    logger.info(f"Starting {settings.APP_NAME}...")
    catalog = get_catalog()
    logger.info(f"Check types loaded: {', '.join(catalog.ids())}")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "app": settings.APP_NAME,
        "version": "1.0.0",
        "docs": "/docs"
    }
