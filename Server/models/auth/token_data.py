"""
Magazine Portal Server - Token Data Model

Pydantic model for data stored in JWT tokens.
"""

from pydantic import BaseModel

from models.auth.user_role import UserRole


class TokenData(BaseModel):
    """Data stored in JWT token"""
    user_id: int
    role: UserRole
