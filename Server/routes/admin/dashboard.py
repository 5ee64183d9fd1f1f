"""
Magazine Portal Server - Admin Dashboard Endpoints
"""

import logging
from typing import List
from fastapi import APIRouter, Depends, Query

from database import GetDatabaseManager
from managers.database_manager import DatabaseManager
from models.auth import Identity
from models.api import AdminDashboardStats, FacultyStats, ActivityEntry
from auth import RequireAdmin
from reporting import GetAdminDashboardStats, GetFacultyStats
from activity_log import GetRecentActivity, GetUserActivity

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter(prefix="/admin", tags=["Admin"])


# ==================== Admin Dashboard ====================

@router.get("/dashboard/stats", response_model=AdminDashboardStats)
async def admin_dashboard_stats(
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get user and submission totals for the admin dashboard
    """
    return GetAdminDashboardStats(db_manager)


@router.get("/faculties/stats", response_model=List[FacultyStats])
async def admin_faculty_stats(
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get submission statistics per faculty
    """
    return GetFacultyStats(db_manager)


@router.get("/activity/recent", response_model=List[ActivityEntry])
async def admin_recent_activity(
    limit: int = Query(10, ge=1, le=100),
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get the most recent activity log entries, including anonymous ones
    """
    return GetRecentActivity(db_manager, limit)


@router.get("/analytics/user-activity", response_model=List[ActivityEntry])
async def admin_user_activity(
    date_range: str = Query("week", alias="dateRange", description="week, month, year or all"),
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get up to 50 user activity entries inside a date range, newest first

    Args:
        date_range: week, month, year or all

    Raises:
        ValidationError: If the date range is not recognised
    """
    return GetUserActivity(db_manager, date_range)
