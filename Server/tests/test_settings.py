"""
Tests for portal settings, user administration and reporting
"""

from datetime import date, datetime, timedelta, timezone

import pytest

from models.auth import UserRole
from models.database import STATUS_SELECTED
from managers.database_manager import DEFAULT_ACADEMIC_SETTING
from portal_settings import (
    GetAcademicSettings,
    UpdateAcademicSettings,
    GetSecuritySettings,
    UpdateSecuritySettings,
    GetNotificationSettings,
    UpdateNotificationSettings
)
from reporting import (
    GetFacultyStats,
    GetFacultyReport,
    GetCoordinatorDashboardStats,
    ListUsers,
    UpdateUserRole
)
from comments import AddComment
from activity_log import LogActivity, GetRecentActivity, GetUserActivity, ACTION_SETTINGS_UPDATED, ACTION_ROLE_UPDATED
from exceptions import NotFoundError, ValidationError


# ==================== Academic Settings ====================

def test_academic_settings_seeded_on_initialize(db_manager):
    settings = GetAcademicSettings(db_manager)

    assert settings["academic_year"] == DEFAULT_ACADEMIC_SETTING["academic_year"]
    assert settings["setting_id"] is not None


def test_update_academic_settings(db_manager, make_user):
    admin = make_user(UserRole.ADMIN)

    updated = UpdateAcademicSettings(db_manager, admin, "2025-2026", date(2026, 3, 1), date(2026, 4, 1))
    assert updated["academic_year"] == "2025-2026"

    current = GetAcademicSettings(db_manager)
    assert current["submission_deadline"] == date(2026, 3, 1)
    assert current["final_edit_deadline"] == date(2026, 4, 1)

    recent = GetRecentActivity(db_manager, 1)
    assert recent[0]["action_type"] == ACTION_SETTINGS_UPDATED


def test_final_deadline_before_submission_deadline_is_rejected(db_manager, make_user):
    admin = make_user(UserRole.ADMIN)

    with pytest.raises(ValidationError) as exc_info:
        UpdateAcademicSettings(db_manager, admin, "2025-2026", date(2026, 4, 1), date(2026, 3, 1))

    assert "cannot be before" in exc_info.value.message
    assert GetAcademicSettings(db_manager)["academic_year"] == DEFAULT_ACADEMIC_SETTING["academic_year"]


def test_academic_settings_require_all_fields(db_manager, make_user):
    with pytest.raises(ValidationError):
        UpdateAcademicSettings(db_manager, make_user(UserRole.ADMIN), "", date(2026, 3, 1), None)


# ==================== Security and Notification Settings ====================

def test_security_settings_round_trip(db_manager, make_user):
    admin = make_user(UserRole.ADMIN)

    UpdateSecuritySettings(db_manager, admin, 90, 5, 30)

    assert GetSecuritySettings(db_manager) == {
        "password_expiry": 90,
        "max_login_attempts": 5,
        "session_timeout": 30,
    }


@pytest.mark.parametrize("values, message", [
    ((29, 5, 30), "Password expiry must be between 30 and 365 days"),
    ((90, 11, 30), "Max login attempts must be between 3 and 10"),
    ((90, 5, 4), "Session timeout must be between 5 and 120 minutes"),
    ((None, 5, 30), "All fields are required"),
])
def test_security_settings_ranges(db_manager, make_user, values, message):
    before = GetSecuritySettings(db_manager)

    with pytest.raises(ValidationError) as exc_info:
        UpdateSecuritySettings(db_manager, make_user(UserRole.ADMIN), *values)

    assert exc_info.value.message == message
    assert GetSecuritySettings(db_manager) == before


def test_notification_settings(db_manager, make_user):
    admin = make_user(UserRole.ADMIN)
    values = {
        "email_notifications": False,
        "comment_notifications": True,
        "status_change_notifications": False,
        "deadline_reminders": True,
    }

    UpdateNotificationSettings(db_manager, admin, values)

    assert GetNotificationSettings(db_manager) == values

    with pytest.raises(ValidationError):
        UpdateNotificationSettings(db_manager, admin, {**values, "deadline_reminders": None})


# ==================== User Administration ====================

def test_update_user_role_accepts_legacy_codes(db_manager, make_user):
    admin = make_user(UserRole.ADMIN)
    student = make_user()

    profile = UpdateUserRole(db_manager, admin, student.user_id, "COORD")

    assert profile["role_id"] == UserRole.COORDINATOR.role_id
    assert profile["role"] == UserRole.COORDINATOR
    assert GetRecentActivity(db_manager, 1)[0]["action_type"] == ACTION_ROLE_UPDATED


def test_update_user_role_validation(db_manager, make_user):
    admin = make_user(UserRole.ADMIN)
    student = make_user()

    with pytest.raises(ValidationError):
        UpdateUserRole(db_manager, admin, student.user_id, "Janitor")
    with pytest.raises(ValidationError):
        UpdateUserRole(db_manager, admin, admin.user_id, UserRole.STUDENT.role_id)
    with pytest.raises(NotFoundError):
        UpdateUserRole(db_manager, admin, 99999, "Student")


def test_list_users_search_and_paging(db_manager, make_user):
    make_user(first_name="Mary", last_name="Shelley")
    make_user(first_name="Percy", last_name="Shelley")
    make_user(first_name="John", last_name="Keats")

    result = ListUsers(db_manager, page=1, limit=10, search="shelley")
    assert result["total"] == 2
    assert {user["first_name"] for user in result["users"]} == {"Mary", "Percy"}

    # Three users plus the seeded admin
    paged = ListUsers(db_manager, page=2, limit=3)
    assert paged["total"] == 4
    assert paged["total_pages"] == 2
    assert len(paged["users"]) == 1


def test_list_users_search_wildcards_are_literal(db_manager, make_user):
    make_user(first_name="Mary", last_name="Shelley")
    make_user(first_name="Ann", last_name="O_Neil", email="ann_oneil@university.edu")

    assert ListUsers(db_manager, search="%")["total"] == 0
    assert ListUsers(db_manager, search="m%y")["total"] == 0

    underscored = ListUsers(db_manager, search="_")
    assert underscored["total"] == 1
    assert underscored["users"][0]["last_name"] == "O_Neil"


# ==================== Activity ====================

def test_user_activity_keeps_entries_without_a_user(db_manager, make_user):
    admin = make_user(UserRole.ADMIN, first_name="Grace")
    LogActivity(db_manager, admin.user_id, ACTION_SETTINGS_UPDATED, "Updated settings")
    LogActivity(db_manager, None, ACTION_ROLE_UPDATED, "Account removed")

    entries = GetUserActivity(db_manager, "week")

    assert [entry["action_details"] for entry in entries] == ["Account removed", "Updated settings"]
    assert entries[0]["user_id"] is None
    assert entries[0]["first_name"] is None
    assert entries[1]["first_name"] == "Grace"


# ==================== Reporting ====================

def test_faculty_report_counts(db_manager, make_user, make_submission):
    now = datetime.now(timezone.utc)
    coordinator = make_user(UserRole.COORDINATOR, faculty_id=1)
    first = make_user(faculty_id=1)
    second = make_user(faculty_id=1)
    make_user(faculty_id=2)

    commented = make_submission(first, submitted_at=now - timedelta(days=1))
    make_submission(first, status=STATUS_SELECTED, submitted_at=now - timedelta(days=2))
    make_submission(second, submitted_at=now - timedelta(days=3))
    AddComment(db_manager, coordinator, commented, "Good")

    report = GetFacultyReport(db_manager, coordinator)
    assert report["submission_count"] == 3
    assert report["selected_count"] == 1
    assert report["contributor_count"] == 2
    assert report["pending_comment_count"] == 2

    dashboard = GetCoordinatorDashboardStats(db_manager, coordinator)
    assert dashboard["faculty_id"] == 1
    assert dashboard["pending_comments"] == 2

    stats = {row["faculty_id"]: row for row in GetFacultyStats(db_manager)}
    assert stats[1]["submission_count"] == 3
    assert stats[2]["submission_count"] == 0
    assert len(stats) == 8
