from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from resumematch.routers import analysis, matching

# Import logging and middleware
from resumematch.utils.logging_config import configure_for_environment, get_logger
from resumematch.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    RequestLoggingMiddleware,
    PerformanceMiddleware,
)
from resumematch.services.pipeline import get_pipeline

# Configure logging first
configure_for_environment()
logger = get_logger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the shared pipeline at startup so configuration errors fail fast"""
    logger.info("Resume Matching API starting up...")
    get_pipeline()
    logger.info("Resume Matching API startup completed")

    yield

    logger.info("Resume Matching API shutting down...")

app = FastAPI(title="Resume Matching API", version="1.0.0", lifespan=lifespan)

# Middleware runs LIFO: the exception handler is added last so it wraps the others
app.add_middleware(PerformanceMiddleware, slow_request_threshold=2.0)
app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(ExceptionHandlerMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.get("/")
@app.head("/")
async def root():
    return {"message": "Welcome to the Resume Matching API", "version": "1.0.0", "status": "ok"}

@app.get("/health")
@app.head("/health")
async def health_check():
    """Health check endpoint - handles both GET and HEAD requests"""
    pipeline = get_pipeline()
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "vocabulary_version": pipeline.settings.vocabulary.version,
    }

# Include routers
app.include_router(analysis.router, prefix="/api")
app.include_router(matching.router, prefix="/api")

logger.info("Resume Matching API initialized successfully")
