"""
Magazine Portal Server - Login Request Model

Pydantic model for login endpoint request.
"""

from typing import Optional

from models.api.camel_model import CamelModel


class LoginRequest(CamelModel):
    """Request model for login endpoint"""
    email: Optional[str] = None
    password: Optional[str] = None
