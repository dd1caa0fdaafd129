"""
FastAPI main application module for the Creator Studio API
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
import time
import logging

from creator_api.api.api_v1.api import api_router
from creator_api.api.responses import CORS_HEADERS, error_response
from creator_api.core.config import settings, validate_settings
from creator_api.core.database import check_database_connection, create_all_tables
from creator_api.core.errors import CreatorApiError

# Configure logging
logging.basicConfig(level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
logger = logging.getLogger(__name__)

# Create FastAPI application
app = FastAPI(
    title="Creator Studio API",
    description="Quota-limited AI content generation with encrypted per-user API keys",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_HOSTS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=[h.strip() for h in CORS_HEADERS["Access-Control-Allow-Headers"].split(",")],
)


# Request timing middleware
@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    return response


# Include API routes
app.include_router(api_router, prefix="/api/v1")


# Health check endpoint
@app.get("/health")
async def health_check():
    """Health check endpoint for monitoring"""
    return {
        "status": "healthy",
        "timestamp": time.time(),
        "version": "1.0.0"
    }


@app.exception_handler(CreatorApiError)
async def creator_api_exception_handler(request: Request, exc: CreatorApiError):
    if exc.detail:
        logger.warning(f"{exc.kind.value}: {exc.detail}")
    return error_response(exc.message, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return error_response("Invalid request body")


# Global exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global exception: {exc}", exc_info=True)
    return error_response("An unexpected error occurred", status_code=500)


# Startup event
@app.on_event("startup")
async def startup_event():
    """Validate configuration and the database before serving"""
    logger.info("Starting Creator Studio API...")

    validate_settings(settings)

    if not check_database_connection():
        logger.error("Failed to connect to database")
        raise RuntimeError("Database connection failed")

    # Create database tables in development
    if settings.ENVIRONMENT == "development":
        create_all_tables()
        logger.info("Database tables created/verified successfully")

    logger.info("Application startup complete")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "creator_api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG,
        log_level="info"
    )
