"""
Magazine Portal Server - Activity Log

Append-only audit trail of notable user actions.
Writing an entry never fails the calling request: errors are logged and
swallowed.
"""

import logging
from datetime import datetime, timezone, timedelta
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from models.database import ActivityLog, User
from managers.database_manager import DatabaseManager
from exceptions import DependencyError, ValidationError

logger = logging.getLogger(__name__)


# Action types
ACTION_LOGIN = "Login"
ACTION_REGISTRATION = "Registration"
ACTION_SUBMISSION = "Submission"
ACTION_COMMENT = "Comment"
ACTION_SELECTION = "Selection"
ACTION_REJECTION = "Rejection"
ACTION_DOWNLOAD = "Download"
ACTION_SETTINGS_UPDATED = "Settings Updated"
ACTION_SECURITY_UPDATED = "Security Updated"
ACTION_NOTIFICATIONS_UPDATED = "Notifications Updated"
ACTION_ROLE_UPDATED = "Role Updated"
ACTION_PASSWORD_CHANGED = "Password Changed"

DATE_RANGES = {
    "week": timedelta(days=7),
    "month": timedelta(days=30),
    "year": timedelta(days=365),
    "all": None,
}


def LogActivity(db_manager: DatabaseManager, user_id: Optional[int], action_type: str,
                details: Optional[str] = None) -> None:
    """
    Append an activity log entry

    Args:
        db_manager: DatabaseManager instance
        user_id: User performing the action
        action_type: One of the ACTION_* constants
        details: Human-readable description
    """
    session = None
    try:
        session = db_manager.GetSession()
        session.add(ActivityLog(
            user_id=user_id,
            action_type=action_type,
            action_details=details,
            log_timestamp=datetime.now(timezone.utc)
        ))
        session.commit()
    except Exception as e:
        if session is not None:
            session.rollback()
        logger.error(f"Error logging {action_type} activity for user {user_id}: {str(e)}")
    finally:
        if session is not None:
            session.close()


def _EntryToDict(entry: ActivityLog, user: Optional[User]) -> dict:
    return {
        "log_id": entry.log_id,
        "user_id": entry.user_id,
        "action_type": entry.action_type,
        "action_details": entry.action_details,
        "log_timestamp": entry.log_timestamp,
        "first_name": user.first_name if user else None,
        "last_name": user.last_name if user else None,
    }


def GetRecentActivity(db_manager: DatabaseManager, limit: int = 10) -> List[dict]:
    """
    Get the most recent activity entries with the acting user's name

    Args:
        db_manager: DatabaseManager instance
        limit: Maximum number of entries

    Returns:
        list: Entry dictionaries, newest first
    """
    session = db_manager.GetSession()
    try:
        rows = session.query(ActivityLog, User).outerjoin(
            User, ActivityLog.user_id == User.user_id
        ).order_by(
            ActivityLog.log_timestamp.desc(), ActivityLog.log_id.desc()
        ).limit(limit).all()

        return [_EntryToDict(entry, user) for entry, user in rows]

    except SQLAlchemyError as e:
        logger.error(f"Error fetching recent activity: {str(e)}")
        raise DependencyError("Failed to fetch recent activity")
    finally:
        session.close()


def GetUserActivity(db_manager: DatabaseManager, date_range: str = "week", limit: int = 50,
                    now: Optional[datetime] = None) -> List[dict]:
    """
    Get activity entries inside a date range

    Args:
        db_manager: DatabaseManager instance
        date_range: 'week', 'month', 'year' or 'all'
        limit: Maximum number of entries
        now: Reference time (defaults to current UTC time)

    Returns:
        list: Entry dictionaries, newest first

    Raises:
        ValidationError: If date_range is not recognised
    """
    if date_range not in DATE_RANGES:
        raise ValidationError(f"Invalid date range. Must be one of: {', '.join(DATE_RANGES)}")

    now = now or datetime.now(timezone.utc)
    window = DATE_RANGES[date_range]

    session = db_manager.GetSession()
    try:
        query = session.query(ActivityLog, User).outerjoin(User, ActivityLog.user_id == User.user_id)
        if window is not None:
            query = query.filter(ActivityLog.log_timestamp >= now - window)

        rows = query.order_by(
            ActivityLog.log_timestamp.desc(), ActivityLog.log_id.desc()
        ).limit(limit).all()

        return [_EntryToDict(entry, user) for entry, user in rows]

    except SQLAlchemyError as e:
        logger.error(f"Error fetching user activity for range '{date_range}': {str(e)}")
        raise DependencyError("Failed to fetch user activity")
    finally:
        session.close()
