"""
Magazine Portal Server - Statistics API Models

Pydantic models for dashboard, faculty and activity reporting endpoints.
"""

from datetime import datetime
from typing import Optional

from models.api.camel_model import CamelModel


class AdminDashboardStats(CamelModel):
    total_users: int
    total_submissions: int
    pending_submissions: int
    selected_submissions: int


class ManagerDashboardStats(CamelModel):
    total_submissions: int
    selected_submissions: int
    pending_selections: int
    total_contributors: int


class CoordinatorDashboardStats(CamelModel):
    faculty_id: int
    total_submissions: int
    pending_comments: int
    selected_submissions: int
    total_contributors: int


class FacultyStats(CamelModel):
    faculty_id: int
    faculty_name: str
    submission_count: int
    selected_count: int
    contributor_count: int


class FacultyReport(FacultyStats):
    pending_comment_count: int


class StudentSummary(CamelModel):
    user_id: int
    first_name: str
    last_name: str
    email: str
    submission_count: int
    selected_count: int


class ActivityEntry(CamelModel):
    log_id: int
    user_id: Optional[int] = None
    action_type: str
    action_details: Optional[str] = None
    log_timestamp: datetime
    first_name: Optional[str] = None
    last_name: Optional[str] = None
