"""
Storefront Service
Auth, order placement and catalog administration API for the Beyond Silhouette shop
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import subprocess
import os

from shared.core import ServiceHealth, setup_logging, RequestLoggingMiddleware, get_logger
from app.core_settings import get_settings
from app.api.admin import router as admin_router
from app.api.auth import router as auth_router
from app.api.errors import register_error_handlers
from app.api.health import router as storefront_health_router
from app.api.orders import router as orders_router
from app.infrastructure import db as database

settings = get_settings()

SERVICE_DESCRIPTION = "Beyond Silhouette storefront backend"

setup_logging(
    service_name=settings.SERVICE_NAME,
    level=settings.LOG_LEVEL,
    environment=settings.ENVIRONMENT,
    version=settings.SERVICE_VERSION,
)

logger = get_logger(__name__)

def run_migrations() -> None:
    logger.info("Running database migrations")
    result = subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=os.path.join(os.path.dirname(__file__), ".."),
        capture_output=True,
        text=True,
        check=False,
    )
    if result.returncode != 0:
        logger.warning(f"Migration output: {result.stderr}")
    else:
        logger.info("Database migrations completed")

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.SERVICE_NAME} version {settings.SERVICE_VERSION}")

    if settings.RUN_MIGRATIONS:
        run_migrations()

    try:
        database.init_models()
        logger.info("Database models initialized")
    except Exception:
        logger.error("Failed to initialize database models", exc_info=True)
        raise

    logger.info(f"{settings.SERVICE_NAME} started successfully")
    yield
    logger.info(f"Shutting down {settings.SERVICE_NAME}")

app = FastAPI(
    title=settings.SERVICE_NAME,
    description=SERVICE_DESCRIPTION,
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

register_error_handlers(app)

health_service = ServiceHealth(settings.SERVICE_NAME, settings.SERVICE_VERSION, lambda: database.engine)
app.include_router(health_service.create_health_router())
app.include_router(storefront_health_router)

app.include_router(auth_router)
app.include_router(orders_router)
app.include_router(admin_router)

@app.get("/info")
async def info():
    return {
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "description": SERVICE_DESCRIPTION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "health": "/health",
            "ready": "/health/ready",
            "live": "/health/live",
            "metrics": "/metrics",
            "docs": "/api/docs",
        },
    }
