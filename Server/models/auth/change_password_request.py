"""
Magazine Portal Server - Change Password Request Model

Pydantic model for change password endpoint request.
"""

from models.api.camel_model import CamelModel


class ChangePasswordRequest(CamelModel):
    """Request model for change password endpoint"""
    current_password: str
    new_password: str
