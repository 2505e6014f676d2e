"""
Bike Storefront API
Catalog queries, inventory ledger, carts, orders, reviews and accounts
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from storefront.core import ServiceHealth, setup_logging, RequestLoggingMiddleware, get_logger
from storefront.core_settings import get_settings
from storefront.api import auth, cart, customers, inventory, orders, products, reviews
from storefront.api.errors import register_error_handlers
from storefront.domain.models import Base
from storefront.infrastructure.db import SessionLocal, engine, init_models
from storefront.seed import seed_catalog

# Service configuration
SERVICE_NAME = "storefront"
SERVICE_DESCRIPTION = "Bike storefront API"

settings = get_settings()

# Setup structured logging
setup_logging(
    service_name=SERVICE_NAME,
    level=settings.LOG_LEVEL,
    version=settings.SERVICE_VERSION,
    environment=settings.ENVIRONMENT,
)

logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle management"""
    logger.info(f"Starting {SERVICE_NAME} version {settings.SERVICE_VERSION}")

    try:
        init_models()
        logger.info("Database models initialized")
    except Exception as e:
        logger.error(f"Failed to initialize database models: {e}")
        raise

    if settings.SEED_ON_STARTUP:
        with SessionLocal() as db:
            seed_catalog(db)

    logger.info(f"{SERVICE_NAME} started successfully")

    yield

    logger.info(f"Shutting down {SERVICE_NAME}")
    engine.dispose()

app = FastAPI(
    title=SERVICE_NAME,
    description=SERVICE_DESCRIPTION,
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json"
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

# Health checks
health_service = ServiceHealth(
    SERVICE_NAME,
    settings.SERVICE_VERSION,
    engine=engine,
    redis_url=settings.REDIS_URL,
    required_tables=Base.metadata.tables.keys(),
)
app.include_router(health_service.create_health_router())

for module in (products, inventory, customers, orders, cart, reviews, auth):
    app.include_router(module.router)

@app.get("/api/health")
async def api_health():
    return {"status": "Server is running", "timestamp": datetime.now(timezone.utc).isoformat()}

@app.get("/")
async def root():
    return {
        "service": SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "status": "running",
        "docs": "/api/docs"
    }
