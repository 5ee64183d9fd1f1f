"""
Magazine Portal Server - Main FastAPI Application

This module builds the FastAPI application for the university magazine
portal. It manages the REST API used by students, faculty coordinators,
marketing managers and administrators.
"""

import logging
from logging.handlers import RotatingFileHandler
from datetime import datetime
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import uvicorn

from config import ServerConfig, LoadConfig
from managers.database_manager import DatabaseManager, DEFAULT_ADMIN_EMAIL
from file_storage import InitializeStorage
from exceptions import PortalError

logger = logging.getLogger(__name__)


# ==================== Logging ====================

def ConfigureLogging(log_dir: str) -> None:
    """
    Configure logging to write to both console and file

    Args:
        log_dir: Directory for the rotating log files
    """
    # Create logs directory if it doesn't exist
    logs_dir = Path(log_dir)
    logs_dir.mkdir(parents=True, exist_ok=True)

    # Create log filename with timestamp
    log_filename = logs_dir / f"magazine-portal-{datetime.now().strftime('%Y-%m-%d')}.log"

    # Configure logging with both console and file handlers
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            # Console handler
            logging.StreamHandler(),
            # File handler with rotation (max 10MB per file, keep 10 backup files)
            RotatingFileHandler(
                log_filename,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=10,
                encoding='utf-8'
            )
        ]
    )


# ==================== Lifespan Events ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler for startup and shutdown
    Manages database initialization and cleanup
    """
    # Startup
    logger.info("Magazine Portal Server starting up...")
    config: ServerConfig = app.state.config

    if app.state.db_manager is None:
        app.state.db_manager = DatabaseManager(config.database_url)

    # Creates tables if needed, but won't recreate admin if exists
    admin_password = app.state.db_manager.InitializeDatabase()
    if admin_password:
        logger.warning("=" * 60)
        logger.warning("NEW ADMIN USER CREATED")
        logger.warning(f"Email: {DEFAULT_ADMIN_EMAIL}")
        logger.warning(f"Password: {admin_password}")
        logger.warning("SAVE THIS PASSWORD - IT WILL NOT BE SHOWN AGAIN!")
        logger.warning("=" * 60)

    logger.info("Database initialized successfully")

    # Initialize file storage
    InitializeStorage(config.upload_root)
    logger.info("File storage initialized successfully")

    logger.info("Server startup complete")

    yield

    # Shutdown
    logger.info("Magazine Portal Server shutting down...")
    app.state.db_manager.Dispose()
    logger.info("Shutdown complete")


# ==================== Exception Handlers ====================

async def portal_error_handler(request: Request, exc: PortalError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected ({exc.status_code}): {exc.message}")

    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    logger.warning(f"HTTP exception on {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)}, headers=exc.headers)


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Validation error on {request.url.path}: {exc.errors()}")

    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg"))

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request: " + "; ".join(messages)}
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled exception on {request.url.path}: {type(exc).__name__}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


# ==================== FastAPI Application ====================

def CreateApp(config: Optional[ServerConfig] = None, db_manager: Optional[DatabaseManager] = None) -> FastAPI:
    """
    Build the FastAPI application

    Args:
        config: Server configuration (loaded from the environment if omitted)
        db_manager: Existing DatabaseManager to use instead of creating one at startup

    Returns:
        FastAPI: Configured application
    """
    config = config or LoadConfig()
    ConfigureLogging(config.log_dir)

    app = FastAPI(
        title="Magazine Portal Server",
        description="Submission and review portal for the university magazine",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.config = config
    app.state.db_manager = db_manager

    # ==================== CORS Middleware ====================

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} - {response.status_code}")
        return response

    app.add_exception_handler(PortalError, portal_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    # ==================== Include Routers ====================

    from routes import status as status_routes, auth, faculties, submissions, coordinator, manager
    from routes.admin import dashboard as admin_dashboard, users as admin_users, settings as admin_settings

    app.include_router(status_routes.router, prefix="/api")
    app.include_router(auth.router, prefix="/api")
    app.include_router(faculties.router, prefix="/api")
    app.include_router(submissions.router, prefix="/api")
    app.include_router(coordinator.router, prefix="/api")
    app.include_router(manager.router, prefix="/api")

    # Include admin route modules
    app.include_router(admin_dashboard.router, prefix="/api")
    app.include_router(admin_users.router, prefix="/api")
    app.include_router(admin_settings.router, prefix="/api")

    return app


# ==================== Main Entry Point ====================

if __name__ == "__main__":
    """
    Run the server using uvicorn
    """
    server_config = LoadConfig()
    ConfigureLogging(server_config.log_dir)

    logger.info("Starting Magazine Portal Server...")

    # reload=False: Auto-reload disabled to prevent spurious log messages from
    #               file monitoring. Manually restart server after code changes.
    uvicorn.run(
        "server:CreateApp",
        factory=True,
        host=server_config.host,
        port=server_config.port,
        reload=False,
        log_level="info"
    )
