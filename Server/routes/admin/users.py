"""
Magazine Portal Server - Admin Users Endpoints
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query

from database import GetDatabaseManager
from managers.database_manager import DatabaseManager
from models.auth import Identity
from models.api import UserSummary, UserListResponse, UpdateUserRoleRequest
from auth import RequireAdmin
from reporting import ListUsers, UpdateUserRole

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/users", response_model=UserListResponse)
async def admin_list_users(
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(10, description="Page size"),
    search: Optional[str] = Query(None, description="Search in name and email"),
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get users with pagination and search, newest account first

    Returns:
        UserListResponse: users, total, page, limit and totalPages
    """
    return ListUsers(db_manager, page=page, limit=limit, search=search)


@router.put("/users/{user_id}/role", response_model=UserSummary)
async def admin_update_user_role(
    user_id: int,
    request_data: UpdateUserRoleRequest,
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Change a user's role

    Args:
        user_id: User to update
        request_data: Role id, legacy code or role name

    Returns:
        UserSummary: The updated user
    """
    return UpdateUserRole(db_manager, identity, user_id, request_data.role)
