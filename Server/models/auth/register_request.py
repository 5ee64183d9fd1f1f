"""
Magazine Portal Server - Register Request Model

Pydantic model for registration endpoint request.
Fields are optional here so that missing values are reported by the
registration service with a single message.
"""

from typing import Optional

from models.api.camel_model import CamelModel


class RegisterRequest(CamelModel):
    """Request model for registration endpoint"""
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    faculty_id: Optional[int] = None
    password: Optional[str] = None
