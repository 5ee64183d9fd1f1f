"""
Magazine Portal Server - Status Endpoints

This module contains the health check and database connectivity endpoints.
"""

import logging
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from database import GetDatabaseManager
from managers.database_manager import DatabaseManager
from exceptions import DependencyError


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


# ==================== Health Check Endpoint ====================

@router.get("/health", tags=["Status"])
async def health_check():
    """
    Health check endpoint to verify server is running

    Returns:
        dict: Server status and current UTC time
    """
    return {
        "status": "healthy",
        "service": "Magazine Portal Server",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }


@router.get("/db-test", tags=["Status"])
async def database_test(db_manager: DatabaseManager = Depends(GetDatabaseManager)):
    """
    Run a trivial query to verify the database is reachable

    Returns:
        dict: Connection status and database time
    """
    session = db_manager.GetSession()
    try:
        session.execute(text("SELECT 1"))
        return {
            "status": "connected",
            "timestamp": datetime.now(timezone.utc).isoformat()
        }
    except SQLAlchemyError as e:
        logger.error(f"Database connectivity check failed: {str(e)}")
        raise DependencyError("Database connection failed")
    finally:
        session.close()
