"""
Food Ordering API - FastAPI application
"""
import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from food_ordering.api import auth, foods, orders, restaurants, reviews
from food_ordering.core.config import settings
from food_ordering.core.database import check_connection, create_tables, engine
from food_ordering.core.exceptions import register_exception_handlers

logger = logging.getLogger(__name__)


def configure_logging():
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    try:
        check_connection()
        create_tables()
    except Exception:
        logger.critical("Database unreachable at startup, shutting down", exc_info=True)
        raise
    logger.info("%s started in %s mode", settings.PROJECT_NAME, settings.ENVIRONMENT)

    yield

    engine.dispose()
    logger.info("%s stopped", settings.PROJECT_NAME)


# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Accounts, restaurant menus, orders and reviews for a food ordering platform",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

for module in (auth, restaurants, foods, orders, reviews):
    app.include_router(module.router, prefix=settings.API_PREFIX)

# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "food-ordering-api"}

# API version info
@app.get("/")
async def root():
    """API root endpoint"""
    return {
        "message": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "docs": "/docs",
        "health": "/health"
    }


def run():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
