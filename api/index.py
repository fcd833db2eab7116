"""
Resuelve Marketplace - Main FastAPI Application

Single entry point for the buyer-facing API.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from resuelve.logging import get_logger
from resuelve.routers import router as api_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler"""
    # Supabase and Redis clients are created lazily on first use
    logger.info("Resuelve API starting")
    yield
    logger.info("Resuelve API stopped")


app = FastAPI(
    title="Resuelve Marketplace",
    description="Local marketplace API: cart, checkout, reviews and notifications",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api")


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}
