"""
Magazine Portal Server - Submission Endpoints

This module contains the public gallery of selected submissions and the
role-scoped submission endpoints shared by all authenticated users.
"""

import logging
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, File as FastAPIFile, UploadFile, Form, status

from config import ServerConfig
from database import GetDatabaseManager, GetConfig
from managers.database_manager import DatabaseManager
from models.auth import Identity, UserRole
from models.api import SubmissionResponse, SubmissionCreatedResponse, SubmissionDetailResponse
from auth import GetCurrentIdentity, RequireStudent
from role_policy import ScopeFor, PublicScope, SubmissionFilters
from submissions import ListSubmissions, GetSubmissionDetail, CreateSubmission


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


@router.get("/public/submissions", response_model=List[SubmissionResponse], tags=["Submissions"])
async def list_public_submissions(
    faculty: Optional[int] = Query(None, description="Faculty id filter"),
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    search: Optional[str] = Query(None, description="Search in title and description"),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    List selected submissions for the public magazine page, newest first
    No authentication required
    """
    filters = SubmissionFilters(academic_year=academic_year, search=search)
    return ListSubmissions(db_manager, PublicScope(faculty), filters)


@router.get("/submissions", response_model=List[SubmissionResponse], tags=["Submissions"])
async def list_submissions(
    faculty: Optional[int] = Query(None, description="Faculty id filter (admins only)"),
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    search: Optional[str] = Query(None, description="Search in title and description"),
    identity: Identity = Depends(GetCurrentIdentity),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    List the submissions visible to the caller, newest first

    Admins see everything, managers see selected submissions, coordinators
    see their faculty and students see their own.
    """
    scope = ScopeFor(identity.role, identity.user_id, identity.faculty_id, faculty_filter=faculty)
    filters = SubmissionFilters(academic_year=academic_year, search=search)
    return ListSubmissions(db_manager, scope, filters)


@router.post("/submissions", response_model=SubmissionCreatedResponse, status_code=status.HTTP_201_CREATED,
             tags=["Submissions"])
async def create_submission(
    file: Optional[UploadFile] = FastAPIFile(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    academic_year: Optional[str] = Form(None, alias="academicYear"),
    terms_accepted: Optional[str] = Form(None, alias="termsAccepted"),
    identity: Identity = Depends(RequireStudent),
    db_manager: DatabaseManager = Depends(GetDatabaseManager),
    config: ServerConfig = Depends(GetConfig)
):
    """
    Upload a new article or image

    Multipart form fields: file, title, description, academicYear, termsAccepted

    Returns:
        SubmissionCreatedResponse: Confirmation message and the new submission
    """
    submission = CreateSubmission(
        db_manager,
        identity,
        title=title,
        description=description,
        fileobj=file.file if file else None,
        filename=file.filename if file else None,
        content_type=file.content_type if file else None,
        academic_year=academic_year,
        terms_accepted=terms_accepted,
        storage_root=config.upload_root,
        max_bytes=config.max_upload_bytes
    )

    return {"message": "Submission created successfully", "submission": submission}


@router.get("/submissions/{submission_id}", response_model=SubmissionDetailResponse, tags=["Submissions"])
async def get_submission(
    submission_id: int,
    identity: Identity = Depends(GetCurrentIdentity),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get one submission visible to the caller, with its comments

    Raises:
        NotFoundError: If the submission does not exist or is out of the caller's scope
    """
    scope = ScopeFor(identity.role, identity.user_id, identity.faculty_id)
    message = "Submission not found or not in your faculty" if identity.role == UserRole.COORDINATOR \
        else "Submission not found"
    return GetSubmissionDetail(db_manager, scope, submission_id, not_found_message=message)
