"""
Magazine Portal Server - Portal Settings

Academic deadlines, security settings and notification settings.
Academic deadlines live in their own table; security and notification
settings are stored as strings in the key-value settings table.
"""

import logging
from datetime import date, datetime, timezone
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from models.database import AcademicSetting, Setting
from models.auth import Identity
from managers.database_manager import DatabaseManager, DEFAULT_ACADEMIC_SETTING, DEFAULT_SETTINGS
from activity_log import (
    LogActivity,
    ACTION_SETTINGS_UPDATED,
    ACTION_SECURITY_UPDATED,
    ACTION_NOTIFICATIONS_UPDATED
)
from exceptions import DependencyError, ValidationError

logger = logging.getLogger(__name__)


# Allowed ranges: (minimum, maximum, message)
SECURITY_LIMITS = {
    "password_expiry": (30, 365, "Password expiry must be between 30 and 365 days"),
    "max_login_attempts": (3, 10, "Max login attempts must be between 3 and 10"),
    "session_timeout": (5, 120, "Session timeout must be between 5 and 120 minutes"),
}

NOTIFICATION_KEYS = [
    "email_notifications",
    "comment_notifications",
    "status_change_notifications",
    "deadline_reminders",
]


# ==================== Academic Settings ====================

def _AcademicToDict(setting: Optional[AcademicSetting]) -> dict:
    if setting is None:
        return {"setting_id": None, **DEFAULT_ACADEMIC_SETTING}

    return {
        "setting_id": setting.setting_id,
        "academic_year": setting.academic_year,
        "submission_deadline": setting.submission_deadline,
        "final_edit_deadline": setting.final_edit_deadline,
    }


def GetAcademicSettings(db_manager: DatabaseManager) -> dict:
    """
    Get the active academic settings, or the defaults if none are stored
    """
    session = db_manager.GetSession()
    try:
        setting = session.query(AcademicSetting).order_by(
            AcademicSetting.academic_year.desc(), AcademicSetting.setting_id.desc()
        ).first()
        return _AcademicToDict(setting)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching academic settings: {str(e)}")
        raise DependencyError("Failed to fetch academic settings")
    finally:
        session.close()


def UpdateAcademicSettings(db_manager: DatabaseManager, identity: Identity, academic_year: Optional[str],
                           submission_deadline: Optional[date], final_edit_deadline: Optional[date]) -> dict:
    """
    Replace the active academic settings

    Runs as a single transaction: the existing row is updated, or a new
    one inserted when none exists.

    Raises:
        ValidationError: If a field is missing or the deadlines are out of order
    """
    academic_year = (academic_year or "").strip()
    if not academic_year or submission_deadline is None or final_edit_deadline is None:
        raise ValidationError("All fields are required")

    if final_edit_deadline < submission_deadline:
        raise ValidationError("Final edit deadline cannot be before the submission deadline")

    session = db_manager.GetSession()
    try:
        setting = session.query(AcademicSetting).order_by(AcademicSetting.setting_id.asc()).first()
        if setting is None:
            setting = AcademicSetting()
            session.add(setting)

        setting.academic_year = academic_year
        setting.submission_deadline = submission_deadline
        setting.final_edit_deadline = final_edit_deadline
        session.commit()

        result = _AcademicToDict(setting)

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error updating academic settings: {str(e)}")
        raise DependencyError("Failed to update academic settings")
    finally:
        session.close()

    logger.info(f"Admin {identity.user_id} updated academic settings for {academic_year}")
    LogActivity(db_manager, identity.user_id, ACTION_SETTINGS_UPDATED,
                f"Admin updated academic settings for {academic_year}")

    return result


# ==================== Key-Value Settings ====================

def _ReadSettings(db_manager: DatabaseManager, keys) -> dict:
    session = db_manager.GetSession()
    try:
        records = session.query(Setting).filter(Setting.key.in_(list(keys))).all()
        stored = {record.key: record.value for record in records}
        return {key: stored.get(key, DEFAULT_SETTINGS[key]) for key in keys}
    except SQLAlchemyError as e:
        logger.error(f"Error fetching settings {list(keys)}: {str(e)}")
        raise DependencyError("Failed to fetch settings")
    finally:
        session.close()


def _WriteSettings(db_manager: DatabaseManager, values: dict) -> None:
    session = db_manager.GetSession()
    try:
        for key, value in values.items():
            setting_record = session.query(Setting).filter(Setting.key == key).first()
            if setting_record:
                setting_record.value = value
            else:
                session.add(Setting(key=key, value=value))
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error updating settings {list(values)}: {str(e)}")
        raise DependencyError("Failed to update settings")
    finally:
        session.close()


def GetSecuritySettings(db_manager: DatabaseManager) -> dict:
    """Get password expiry (days), max login attempts and session timeout (minutes)"""
    stored = _ReadSettings(db_manager, SECURITY_LIMITS.keys())
    return {key: int(value) for key, value in stored.items()}


def UpdateSecuritySettings(db_manager: DatabaseManager, identity: Identity, password_expiry: Optional[int],
                           max_login_attempts: Optional[int], session_timeout: Optional[int]) -> dict:
    """
    Validate and store security settings

    Raises:
        ValidationError: If a value is missing or out of range
    """
    values = {
        "password_expiry": password_expiry,
        "max_login_attempts": max_login_attempts,
        "session_timeout": session_timeout,
    }

    if any(value is None for value in values.values()):
        raise ValidationError("All fields are required")

    for key, value in values.items():
        minimum, maximum, message = SECURITY_LIMITS[key]
        if value < minimum or value > maximum:
            raise ValidationError(message)

    _WriteSettings(db_manager, {key: str(value) for key, value in values.items()})

    logger.info(f"Admin {identity.user_id} updated security settings: {values}")
    LogActivity(db_manager, identity.user_id, ACTION_SECURITY_UPDATED, "Admin updated security settings")

    return {**values, "updated_at": datetime.now(timezone.utc)}


def GetNotificationSettings(db_manager: DatabaseManager) -> dict:
    stored = _ReadSettings(db_manager, NOTIFICATION_KEYS)
    return {key: value == "true" for key, value in stored.items()}


def UpdateNotificationSettings(db_manager: DatabaseManager, identity: Identity, values: dict) -> dict:
    """
    Store the four notification switches

    Args:
        db_manager: DatabaseManager instance
        identity: Acting admin
        values: Mapping of each notification key to a boolean

    Raises:
        ValidationError: If any switch is missing
    """
    if any(values.get(key) is None for key in NOTIFICATION_KEYS):
        raise ValidationError("All fields are required")

    cleaned = {key: bool(values[key]) for key in NOTIFICATION_KEYS}
    _WriteSettings(db_manager, {key: "true" if value else "false" for key, value in cleaned.items()})

    logger.info(f"Admin {identity.user_id} updated notification settings: {cleaned}")
    LogActivity(db_manager, identity.user_id, ACTION_NOTIFICATIONS_UPDATED, "Admin updated notification settings")

    return {**cleaned, "updated_at": datetime.now(timezone.utc)}
