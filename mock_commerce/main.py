"""
Mock Commerce Application

A simulated commerce backend for developing and testing the checkout
service: carts, checkout tokens, shipping, locale data and order capture.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from .errors import CommerceError, commerce_error_handler
from .routes import products_router, cart_router, checkout_router, orders_router, locale_router

# Load environment variables
load_dotenv(os.path.join(os.getcwd(), "config", ".env"))

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Mock Commerce starting up...")
    logger.info(f"Public key check: {'enabled' if os.getenv('COMMERCE_PUBLIC_KEY') else 'disabled'}")
    yield
    logger.info("Mock Commerce shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Mock Commerce",
    description="Simulated commerce backend for checkout testing",
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

app.add_exception_handler(CommerceError, commerce_error_handler)

# Include API routers
app.include_router(products_router)
app.include_router(cart_router)
app.include_router(checkout_router)
app.include_router(orders_router)
app.include_router(locale_router)


@app.get("/")
async def home():
    """API index"""
    return {
        "message": "Mock Commerce API",
        "docs": "/docs",
        "endpoints": {
            "products": "/v1/products",
            "carts": "/v1/carts",
            "checkouts": "/v1/checkouts",
            "orders": "/v1/orders",
            "locale": "/v1/services/locale",
        },
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "service": "mock-commerce"}


def run() -> None:
    import uvicorn

    uvicorn.run(
        "mock_commerce.main:app",
        host="0.0.0.0",
        port=8001,
        reload=True,
    )


if __name__ == "__main__":
    run()
