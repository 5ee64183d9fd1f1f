"""
Magazine Portal Server - Admin Settings Endpoints
"""

import logging
from fastapi import APIRouter, Depends

from database import GetDatabaseManager
from managers.database_manager import DatabaseManager
from models.auth import Identity
from models.api import (
    AcademicSettingsRequest,
    AcademicSettingsResponse,
    SecuritySettingsRequest,
    SecuritySettingsResponse,
    NotificationSettingsRequest,
    NotificationSettingsResponse
)
from auth import RequireAdmin
from portal_settings import (
    GetAcademicSettings,
    UpdateAcademicSettings,
    GetSecuritySettings,
    UpdateSecuritySettings,
    GetNotificationSettings,
    UpdateNotificationSettings
)

# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter(prefix="/admin/settings", tags=["Admin"])


# ==================== Academic Settings ====================

@router.get("/academic", response_model=AcademicSettingsResponse)
async def admin_get_academic_settings(
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get the active academic year and its deadlines
    """
    return GetAcademicSettings(db_manager)


@router.put("/academic", response_model=AcademicSettingsResponse)
async def admin_update_academic_settings(
    request: AcademicSettingsRequest,
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Update the academic year and its deadlines

    Args:
        request: academicYear, submissionDeadline and finalEditDeadline
    """
    return UpdateAcademicSettings(
        db_manager,
        identity,
        request.academic_year,
        request.submission_deadline,
        request.final_edit_deadline
    )


# ==================== Security Settings ====================

@router.get("/security", response_model=SecuritySettingsResponse)
async def admin_get_security_settings(
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get password expiry, login attempt and session timeout settings
    """
    return GetSecuritySettings(db_manager)


@router.put("/security", response_model=SecuritySettingsResponse)
async def admin_update_security_settings(
    request: SecuritySettingsRequest,
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Update security settings

    Raises:
        ValidationError: If a value is missing or outside its allowed range
    """
    return UpdateSecuritySettings(
        db_manager,
        identity,
        request.password_expiry,
        request.max_login_attempts,
        request.session_timeout
    )


# ==================== Notification Settings ====================

@router.get("/notifications", response_model=NotificationSettingsResponse)
async def admin_get_notification_settings(
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    return GetNotificationSettings(db_manager)


@router.put("/notifications", response_model=NotificationSettingsResponse)
async def admin_update_notification_settings(
    request: NotificationSettingsRequest,
    identity: Identity = Depends(RequireAdmin),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Update the notification switches. All four are required
    """
    return UpdateNotificationSettings(db_manager, identity, request.model_dump())
