"""
Magazine Portal Server - Manager Endpoints

Cross-faculty endpoints for the marketing manager: statistics, recent
activity, selected submissions, the ZIP export and rejection.
Every endpoint requires the Manager role.
"""

import logging
from datetime import datetime, timezone
from typing import List
from fastapi import APIRouter, Depends, Query, Response

from config import ServerConfig
from database import GetDatabaseManager, GetConfig
from managers.database_manager import DatabaseManager
from models.auth import Identity
from models.api import (
    ManagerDashboardStats,
    FacultyStats,
    ActivityEntry,
    SubmissionResponse,
    StatusChangeResponse
)
from auth import RequireManager
from role_policy import ScopeFor
from submissions import ListSubmissions, BuildSubmissionArchive
from workflow import RejectSubmission
from reporting import GetManagerDashboardStats, GetFacultyStats
from activity_log import GetRecentActivity


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter(prefix="/manager", tags=["Manager"])


@router.get("/dashboard/stats", response_model=ManagerDashboardStats)
async def manager_dashboard_stats(
    identity: Identity = Depends(RequireManager),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get submission and contributor counts across all faculties
    """
    return GetManagerDashboardStats(db_manager)


@router.get("/faculty-stats", response_model=List[FacultyStats])
async def manager_faculty_stats(
    identity: Identity = Depends(RequireManager),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get submission statistics per faculty
    """
    return GetFacultyStats(db_manager)


@router.get("/activity/recent", response_model=List[ActivityEntry])
async def manager_recent_activity(
    limit: int = Query(10, ge=1, le=100),
    identity: Identity = Depends(RequireManager),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get the most recent activity log entries
    """
    return GetRecentActivity(db_manager, limit)


@router.get("/selected-submissions", response_model=List[SubmissionResponse])
async def manager_selected_submissions(
    identity: Identity = Depends(RequireManager),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    List selected submissions from every faculty, newest first
    """
    scope = ScopeFor(identity.role, identity.user_id, identity.faculty_id)
    return ListSubmissions(db_manager, scope)


@router.get("/download-zip")
async def manager_download_zip(
    identity: Identity = Depends(RequireManager),
    db_manager: DatabaseManager = Depends(GetDatabaseManager),
    config: ServerConfig = Depends(GetConfig)
):
    """
    Download every selected submission as a ZIP archive, one folder per faculty

    Returns:
        Response: application/zip attachment
    """
    content, count = BuildSubmissionArchive(db_manager, identity, config.upload_root)
    filename = f"selected-submissions-{datetime.now(timezone.utc).strftime('%Y-%m-%d')}.zip"

    return Response(
        content=content,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-File-Count": str(count)
        }
    )


@router.patch("/submissions/{submission_id}/reject", response_model=StatusChangeResponse)
async def manager_reject_submission(
    submission_id: int,
    identity: Identity = Depends(RequireManager),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Reject a selected submission. Rejected submissions cannot be selected again

    Raises:
        NotFoundError: If the submission is not currently selected
    """
    submission = RejectSubmission(db_manager, identity, submission_id)
    return {"message": "Submission rejected successfully", "submission": submission}
