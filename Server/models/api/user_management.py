"""
Magazine Portal Server - User Management API Models

Pydantic models for user management admin endpoints.
"""

from datetime import datetime
from typing import List, Optional, Union

from models.api.camel_model import CamelModel
from models.auth.user_role import UserRole


class UserSummary(CamelModel):
    user_id: int
    first_name: str
    last_name: str
    email: str
    faculty_id: int
    faculty_name: Optional[str] = None
    role_id: int
    role_name: Optional[str] = None
    role: Optional[UserRole] = None
    created_at: datetime
    last_login: Optional[datetime] = None


class UserListResponse(CamelModel):
    users: List[UserSummary]
    total: int
    page: int
    limit: int
    total_pages: int


class UpdateUserRoleRequest(CamelModel):
    """Role may be given as a role id, legacy code or role name"""
    role: Union[int, str]
