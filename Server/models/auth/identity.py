"""
Magazine Portal Server - Identity Model

The authenticated caller as resolved from a bearer token and the user row.
"""

from typing import Optional
from pydantic import BaseModel

from models.auth.user_role import UserRole


class Identity(BaseModel):
    """Authenticated user with a normalized role"""
    user_id: int
    role: UserRole
    faculty_id: Optional[int] = None
    email: str
    first_name: str
    last_name: str
