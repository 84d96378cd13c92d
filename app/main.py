import logging
from fastapi import FastAPI
from contextlib import asynccontextmanager
from app.api.routes import router
from app.core.logging import setup_logging

logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.
    Configure logging on startup.
    """
    setup_logging()
    logger.info("Starting Product Scraper...")

    yield

    logger.info("Shutting down Product Scraper...")

app = FastAPI(
    title="Product Scraper",
    description="API for extracting price, stock and variant data from product pages",
    version="1.0.0",
    lifespan=lifespan
)

# Include API routes
app.include_router(router)

@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "service": "Product Scraper",
        "version": "1.0.0",
        "endpoints": {
            "scrape": "POST /api/scrape",
            "batch": "POST /api/scrape/batch",
            "variants": "POST /api/scrape/variants",
            "health": "GET /health"
        }
    }
