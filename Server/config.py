"""
Magazine Portal Server - Configuration

Server configuration loaded from environment variables.
A .env file in the working directory is read first if present.
"""

import logging
import os
import secrets
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


DEFAULT_DATABASE_URL = "sqlite:///database/magazine.db"
DEFAULT_UPLOAD_ROOT = "uploads"
DEFAULT_LOG_DIR = "logs"


@dataclass
class ServerConfig:
    """Runtime configuration for the portal server"""
    database_url: str = DEFAULT_DATABASE_URL
    jwt_secret: str = field(default_factory=lambda: secrets.token_urlsafe(32))
    jwt_algorithm: str = "HS256"
    jwt_expiration_hours: int = 24
    upload_root: str = DEFAULT_UPLOAD_ROOT
    max_upload_mb: int = 10
    log_dir: str = DEFAULT_LOG_DIR
    cors_origins: List[str] = field(default_factory=lambda: ["http://localhost:3000"])
    host: str = "0.0.0.0"
    port: int = 5001

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024


def LoadConfig() -> ServerConfig:
    """
    Build a ServerConfig from the environment

    Returns:
        ServerConfig: Configuration with defaults for unset variables
    """
    load_dotenv()

    jwt_secret = os.getenv("JWT_SECRET", "").strip()
    if not jwt_secret:
        # Tokens will not survive a restart
        logger.warning("JWT_SECRET is not set, generating a random secret for this process")
        jwt_secret = secrets.token_urlsafe(32)

    origins = os.getenv("FRONTEND_URL", "http://localhost:3000")

    return ServerConfig(
        database_url=os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL),
        jwt_secret=jwt_secret,
        jwt_expiration_hours=int(os.getenv("JWT_EXPIRATION_HOURS", "24") or "24"),
        upload_root=os.getenv("UPLOAD_ROOT", DEFAULT_UPLOAD_ROOT),
        max_upload_mb=int(os.getenv("MAX_UPLOAD_MB", "10") or "10"),
        log_dir=os.getenv("LOG_DIR", DEFAULT_LOG_DIR),
        cors_origins=[origin.strip() for origin in origins.split(",") if origin.strip()],
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "5001") or "5001"),
    )
