"""
Magazine Portal Server - API Models Package

This package contains Pydantic models for all API endpoints.
"""

from models.api.camel_model import CamelModel
from models.api.comment import CommentRequest, CommentResponse, CommentCreatedResponse
from models.api.submission import (
    SubmissionResponse,
    SubmissionCreatedResponse,
    SubmissionDetailResponse,
    SubmissionPage,
    SelectionRequest,
    StatusChangeResponse
)
from models.api.faculty import FacultyResponse
from models.api.settings import (
    AcademicSettingsRequest,
    AcademicSettingsResponse,
    SecuritySettingsRequest,
    SecuritySettingsResponse,
    NotificationSettingsRequest,
    NotificationSettingsResponse
)
from models.api.statistics import (
    AdminDashboardStats,
    ManagerDashboardStats,
    CoordinatorDashboardStats,
    FacultyStats,
    FacultyReport,
    StudentSummary,
    ActivityEntry
)
from models.api.user_management import UserSummary, UserListResponse, UpdateUserRoleRequest

__all__ = [
    'CamelModel',
    'CommentRequest',
    'CommentResponse',
    'CommentCreatedResponse',
    'SubmissionResponse',
    'SubmissionCreatedResponse',
    'SubmissionDetailResponse',
    'SubmissionPage',
    'SelectionRequest',
    'StatusChangeResponse',
    'FacultyResponse',
    'AcademicSettingsRequest',
    'AcademicSettingsResponse',
    'SecuritySettingsRequest',
    'SecuritySettingsResponse',
    'NotificationSettingsRequest',
    'NotificationSettingsResponse',
    'AdminDashboardStats',
    'ManagerDashboardStats',
    'CoordinatorDashboardStats',
    'FacultyStats',
    'FacultyReport',
    'StudentSummary',
    'ActivityEntry',
    'UserSummary',
    'UserListResponse',
    'UpdateUserRoleRequest',
]
