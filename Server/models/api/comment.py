"""
Magazine Portal Server - Comment API Models

Pydantic models for coordinator review comments.
"""

from datetime import datetime
from typing import Optional

from models.api.camel_model import CamelModel
from models.auth.user_role import UserRole


class CommentRequest(CamelModel):
    comment_text: Optional[str] = None


class CommentResponse(CamelModel):
    """A comment with its author's name and role"""
    comment_id: int
    submission_id: int
    user_id: int
    comment_text: str
    commented_at: datetime
    is_read: bool
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: Optional[UserRole] = None


class CommentCreatedResponse(CamelModel):
    message: str
    comment: CommentResponse
