"""
Magazine Portal Server - Settings API Models

Pydantic models for academic, security and notification settings endpoints.
Request fields are optional so that missing values are reported with a
single "All fields are required" message.
"""

from datetime import date, datetime
from typing import Optional

from models.api.camel_model import CamelModel


class AcademicSettingsRequest(CamelModel):
    academic_year: Optional[str] = None
    submission_deadline: Optional[date] = None
    final_edit_deadline: Optional[date] = None


class AcademicSettingsResponse(CamelModel):
    setting_id: Optional[int] = None
    academic_year: str
    submission_deadline: date
    final_edit_deadline: date


class SecuritySettingsRequest(CamelModel):
    password_expiry: Optional[int] = None  # days
    max_login_attempts: Optional[int] = None
    session_timeout: Optional[int] = None  # minutes


class SecuritySettingsResponse(CamelModel):
    password_expiry: int
    max_login_attempts: int
    session_timeout: int
    updated_at: Optional[datetime] = None


class NotificationSettingsRequest(CamelModel):
    email_notifications: Optional[bool] = None
    comment_notifications: Optional[bool] = None
    status_change_notifications: Optional[bool] = None
    deadline_reminders: Optional[bool] = None


class NotificationSettingsResponse(CamelModel):
    email_notifications: bool
    comment_notifications: bool
    status_change_notifications: bool
    deadline_reminders: bool
    updated_at: Optional[datetime] = None
