"""
Checkout Service Application

Client-side checkout orchestration over a remote commerce backend.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .routes import checkout_router
from .core.config import settings

# Load environment variables
load_dotenv(os.path.join(os.getcwd(), "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Checkout Service starting up...")
    logger.info(f"Commerce URL: {settings.commerce_base_url}")

    yield

    logger.info("Checkout Service shutting down...")
    from .routes import checkout
    if checkout.commerce_client:
        await checkout.commerce_client.close()


# Create FastAPI app
app = FastAPI(
    title="Checkout Service",
    description="Checkout session synchronization and order submission",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # In production, restrict this
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(checkout_router)


@app.get("/")
async def home():
    """Service index"""
    return {
        "message": "Checkout Service API",
        "docs": "/docs",
        "endpoints": {
            "checkout": "/api/checkout",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": "checkout-service",
        "commerce_configured": bool(settings.commerce_base_url),
    }


def run() -> None:
    import uvicorn

    uvicorn.run(
        "checkout_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
