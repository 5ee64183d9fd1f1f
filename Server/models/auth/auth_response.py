"""
Magazine Portal Server - Auth Response Models

Pydantic models returned by the login and registration endpoints.
"""

from datetime import datetime
from typing import Optional

from models.api.camel_model import CamelModel
from models.auth.user_role import UserRole


class AuthUser(CamelModel):
    """User summary included with a session token"""
    id: int
    first_name: str
    last_name: str
    email: str
    faculty: int
    role: UserRole
    last_login: Optional[datetime] = None


class AuthResponse(CamelModel):
    """Response model for login and registration"""
    token: str
    user: AuthUser
    expires_in: int  # Seconds until token expiration
