"""
Magazine Portal Server - Database Module

FastAPI dependencies that hand the application's DatabaseManager and
configuration to route handlers. Both are created in the server lifespan
handler and stored on app.state.
"""

from fastapi import Request

from config import ServerConfig
from managers.database_manager import DatabaseManager


def GetDatabaseManager(request: Request) -> DatabaseManager:
    """
    FastAPI dependency returning the application's DatabaseManager
    """
    return request.app.state.db_manager


def GetConfig(request: Request) -> ServerConfig:
    """
    FastAPI dependency returning the application's ServerConfig
    """
    return request.app.state.config
