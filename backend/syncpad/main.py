"""
SyncPad Backend - Main Application Entry Point
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
import logging

from .config import settings
from .database import database
from .services.encryption import init_encryption
from .services.client_detection import detect_frontend
from .routes import (
    auth_router,
    password_reset_router,
    profile_router,
    notes_router,
    shared_router,
    messages_router,
    spectator_router,
    admin_router,
)

VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager"""
    # Startup
    logger.info("Starting SyncPad Backend...")

    await database.connect()

    if database.is_connected():
        logger.info("✓ Database connected successfully")
    else:
        logger.warning("⚠ Database connection failed - running in degraded mode")
        logger.warning("Some features may not be available")

    init_encryption(settings.encryption_key)
    logger.info("Encryption initialized")

    yield

    # Shutdown
    logger.info("Shutting down SyncPad Backend...")
    await database.disconnect()


app = FastAPI(
    title="SyncPad API",
    description="Notes with passcodes, public links and mini-note messaging",
    version=VERSION,
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_credentials=True,
    allow_origins=settings.allowed_origins.split(",") if settings.allowed_origins != "*" else ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(PyMongoError)
async def database_error_handler(request: Request, exc: PyMongoError):
    """Ошибки MongoDB превращаются в 503"""
    logger.error(f"Database error on {request.method} {request.url.path}: {type(exc).__name__} - {exc}")
    return JSONResponse(status_code=503, content={"detail": "Database temporarily unavailable"})


# Include routers
app.include_router(auth_router, prefix="/api")
app.include_router(password_reset_router, prefix="/api")
app.include_router(profile_router, prefix="/api")
app.include_router(notes_router, prefix="/api")
app.include_router(shared_router, prefix="/api")
app.include_router(messages_router, prefix="/api")
app.include_router(spectator_router, prefix="/api")
app.include_router(admin_router, prefix="/api")


@app.get("/")
async def root(request: Request):
    """Root endpoint"""
    return {"message": "SyncPad API", "version": VERSION, "frontend": detect_frontend(request)}


@app.get("/health")
async def health_check():
    """Health check endpoint with database status"""
    db_connected = await database.check_connection()

    return {
        "status": "healthy" if db_connected else "degraded",
        "database": "connected" if db_connected else "disconnected",
        "version": VERSION
    }
