"""
Magazine Portal Server - Submission API Models

Pydantic models for submission listing, detail and selection endpoints.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import StrictBool

from models.api.camel_model import CamelModel
from models.api.comment import CommentResponse


class SubmissionResponse(CamelModel):
    """A submission row with its author and review state"""
    submission_id: int
    user_id: int
    faculty_id: int
    title: str
    description: Optional[str] = None
    file_path: str
    file_type: str
    academic_year: str
    submitted_at: datetime
    status: str
    selected: bool
    terms_accepted: bool
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    faculty_name: Optional[str] = None
    comment_count: int = 0
    needs_comment: bool = True
    needs_urgent_comment: bool = False


class SubmissionCreatedResponse(CamelModel):
    message: str
    submission: SubmissionResponse


class SubmissionDetailResponse(CamelModel):
    submission: SubmissionResponse
    comments: List[CommentResponse]


class SubmissionPage(CamelModel):
    """One page of the coordinator worklist"""
    submissions: List[SubmissionResponse]
    page: int
    limit: int
    total: int
    total_pages: int


class SelectionRequest(CamelModel):
    selected: Optional[StrictBool] = None


class StatusChangeResponse(CamelModel):
    message: str
    submission: SubmissionResponse
