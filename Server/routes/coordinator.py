"""
Magazine Portal Server - Coordinator Endpoints

Faculty-scoped review endpoints: the worklist, submission detail,
comments, selection, faculty reports and file downloads.
Every endpoint requires the Coordinator role.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import FileResponse

from config import ServerConfig
from database import GetDatabaseManager, GetConfig
from managers.database_manager import DatabaseManager
from models.auth import Identity
from models.api import (
    SubmissionPage,
    SubmissionDetailResponse,
    CommentRequest,
    CommentCreatedResponse,
    SelectionRequest,
    StatusChangeResponse,
    CoordinatorDashboardStats,
    FacultyResponse,
    FacultyReport,
    StudentSummary
)
from auth import RequireCoordinator
from role_policy import ScopeFor, SubmissionFilters
from submissions import ListWorklist, GetSubmissionDetail, GetDownload, NOT_IN_FACULTY_MESSAGE
from comments import AddComment
from workflow import SetSelection
from reporting import GetCoordinatorDashboardStats, GetFaculty, GetFacultyReport, ListFacultyStudents


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter(prefix="/coordinator", tags=["Coordinator"])


# ==================== Dashboard ====================

@router.get("/dashboard/stats", response_model=CoordinatorDashboardStats)
async def coordinator_dashboard_stats(
    identity: Identity = Depends(RequireCoordinator),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get dashboard statistics for the coordinator's faculty
    """
    return GetCoordinatorDashboardStats(db_manager, identity)


@router.get("/faculty", response_model=FacultyResponse)
async def coordinator_faculty(
    identity: Identity = Depends(RequireCoordinator),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get the coordinator's faculty information
    """
    return GetFaculty(db_manager, identity.faculty_id)


# ==================== Review Worklist ====================

@router.get("/submissions", response_model=SubmissionPage)
async def coordinator_submissions(
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(10, description="Page size"),
    status_filter: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None, description="Search in title, description and author name"),
    needs_comment: bool = Query(False, alias="needsComment"),
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    identity: Identity = Depends(RequireCoordinator),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get one page of the faculty worklist

    Urgent uncommented submissions are listed first, then newest first.

    Returns:
        SubmissionPage: submissions, page, limit, total and totalPages
    """
    scope = ScopeFor(identity.role, identity.user_id, identity.faculty_id)
    filters = SubmissionFilters(
        academic_year=academic_year,
        search=search,
        status=status_filter,
        needs_comment=needs_comment,
        search_author_names=True
    )
    return ListWorklist(db_manager, scope, filters, page=page, limit=limit)


@router.get("/submissions/{submission_id}", response_model=SubmissionDetailResponse)
async def coordinator_submission_detail(
    submission_id: int,
    identity: Identity = Depends(RequireCoordinator),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get a submission in the coordinator's faculty with its comments, newest first

    Raises:
        NotFoundError: If the submission is not in the coordinator's faculty
    """
    scope = ScopeFor(identity.role, identity.user_id, identity.faculty_id)
    return GetSubmissionDetail(db_manager, scope, submission_id, not_found_message=NOT_IN_FACULTY_MESSAGE)


@router.post("/submissions/{submission_id}/comments", response_model=CommentCreatedResponse,
             status_code=status.HTTP_201_CREATED)
async def coordinator_add_comment(
    submission_id: int,
    comment_request: CommentRequest,
    identity: Identity = Depends(RequireCoordinator),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Add a review comment to a submission

    Args:
        submission_id: Submission to comment on
        comment_request: commentText

    Returns:
        CommentCreatedResponse: Confirmation message and the new comment
    """
    comment = AddComment(db_manager, identity, submission_id, comment_request.comment_text)
    return {"message": "Comment added successfully", "comment": comment}


@router.patch("/submissions/{submission_id}/select", response_model=StatusChangeResponse)
async def coordinator_select_submission(
    submission_id: int,
    selection_request: SelectionRequest,
    identity: Identity = Depends(RequireCoordinator),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Select a submission for publication, or return it to Submitted

    Args:
        submission_id: Submission to update
        selection_request: {"selected": true|false}

    Returns:
        StatusChangeResponse: Confirmation message and the updated submission
    """
    submission = SetSelection(db_manager, identity, submission_id, selection_request.selected)
    action = "selected" if selection_request.selected else "unselected"
    return {"message": f"Submission {action} successfully", "submission": submission}


# ==================== Faculty Reports ====================

@router.get("/students", response_model=List[StudentSummary])
async def coordinator_students(
    identity: Identity = Depends(RequireCoordinator),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    List students in the coordinator's faculty with submission counts
    """
    return ListFacultyStudents(db_manager, identity)


@router.get("/reports/faculty", response_model=FacultyReport)
async def coordinator_faculty_report(
    identity: Identity = Depends(RequireCoordinator),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get submission, selection, contributor and pending comment counts for the faculty
    """
    return GetFacultyReport(db_manager, identity)


@router.get("/download/{submission_id}")
async def coordinator_download(
    submission_id: int,
    identity: Identity = Depends(RequireCoordinator),
    db_manager: DatabaseManager = Depends(GetDatabaseManager),
    config: ServerConfig = Depends(GetConfig)
):
    """
    Download a submission file from the coordinator's faculty

    Returns:
        FileResponse: File content with a content type matching its file type
    """
    download = GetDownload(db_manager, identity, submission_id, config.upload_root)

    logger.info(f"Coordinator {identity.user_id} downloading submission {submission_id}")

    return FileResponse(
        path=str(download["path"]),
        filename=download["filename"],
        media_type=download["content_type"]
    )
