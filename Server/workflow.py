"""
Magazine Portal Server - Submission Workflow

State machine for a submission's review lifecycle and the derived review
flags used to build the coordinator worklist.

State Flow: Submitted <-> Selected -> Rejected

- Coordinators select and unselect submissions in their own faculty.
- Managers reject selected submissions. Rejected is terminal.
- selected is True exactly when status is Selected.
"""

import logging
from datetime import datetime, timezone, timedelta
from typing import Optional

from sqlalchemy import and_, case
from sqlalchemy.exc import SQLAlchemyError

from models.database import Submission, STATUS_SUBMITTED, STATUS_SELECTED, STATUS_REJECTED
from models.auth import Identity, UserRole
from managers.database_manager import DatabaseManager
from role_policy import ScopeFor, ApplyScope
from activity_log import LogActivity, ACTION_SELECTION, ACTION_REJECTION
from exceptions import AuthError, ConflictError, DependencyError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


# Uncommented submissions younger than this are urgent
URGENT_COMMENT_WINDOW = timedelta(days=14)

# Valid status transitions
TRANSITIONS = {
    STATUS_SUBMITTED: [STATUS_SUBMITTED, STATUS_SELECTED],
    STATUS_SELECTED: [STATUS_SELECTED, STATUS_SUBMITTED, STATUS_REJECTED],
    STATUS_REJECTED: [],
}


# ==================== Time Helpers ====================

def UtcNow() -> datetime:
    return datetime.now(timezone.utc)


def AsUtc(value: Optional[datetime]) -> Optional[datetime]:
    """
    Ensure a datetime is timezone-aware UTC
    SQLite returns naive datetimes for values stored as UTC
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# ==================== Derived Review Flags ====================

def NeedsComment(comment_count: int) -> bool:
    """A submission needs a comment until its first one is added"""
    return not comment_count


def NeedsUrgentComment(submitted_at: datetime, comment_count: int, now: Optional[datetime] = None) -> bool:
    """
    Check whether an uncommented submission is still inside the comment window

    Args:
        submitted_at: Submission time
        comment_count: Number of comments on the submission
        now: Reference time (defaults to current UTC time)

    Returns:
        bool: True if uncommented and submitted less than 14 days ago
    """
    if not NeedsComment(comment_count):
        return False
    now = AsUtc(now) if now else UtcNow()
    return now - AsUtc(submitted_at) < URGENT_COMMENT_WINDOW


def UrgencyRank(comment_count_column, now: Optional[datetime] = None):
    """
    SQL expression ranking urgent uncommented submissions (0) before the rest (1)

    Args:
        comment_count_column: Column expression holding the comment count
        now: Reference time (defaults to current UTC time)

    Returns:
        SQL CASE expression for use in ORDER BY
    """
    now = AsUtc(now) if now else UtcNow()
    cutoff = now - URGENT_COMMENT_WINDOW
    return case(
        (and_(Submission.submitted_at > cutoff, comment_count_column == 0), 0),
        else_=1
    )


# ==================== Transitions ====================

def CanTransition(current_status: str, target_status: str) -> bool:
    return target_status in TRANSITIONS.get(current_status, [])


def _ApplyTransition(submission: Submission, target_status: str) -> None:
    if not CanTransition(submission.status, target_status):
        raise ConflictError(f"Submission is {submission.status} and cannot become {target_status}")

    submission.status = target_status
    submission.selected = target_status == STATUS_SELECTED


def _LoadScopedSubmission(session, scope, submission_id: int, not_found_message: str) -> Submission:
    submission = ApplyScope(
        session.query(Submission).filter(Submission.submission_id == submission_id),
        scope
    ).first()

    if not submission:
        raise NotFoundError(not_found_message)

    return submission


def SetSelection(db_manager: DatabaseManager, identity: Identity, submission_id: int, selected,
                 now: Optional[datetime] = None) -> dict:
    """
    Select or unselect a submission for publication

    Args:
        db_manager: DatabaseManager instance
        identity: Acting coordinator
        submission_id: Submission to update
        selected: True to select, False to return it to Submitted
        now: Reference time for the returned review flags

    Returns:
        dict: Updated submission

    Raises:
        ValidationError: If selected is not a boolean
        AuthError: If the caller is not a coordinator
        NotFoundError: If the submission is not in the coordinator's faculty
        ConflictError: If the submission has been rejected
    """
    if not isinstance(selected, bool):
        raise ValidationError("Selected status is required")

    if identity.role != UserRole.COORDINATOR:
        raise AuthError("Coordinator access required", status_code=403)

    scope = ScopeFor(identity.role, identity.user_id, identity.faculty_id)
    target_status = STATUS_SELECTED if selected else STATUS_SUBMITTED

    session = db_manager.GetSession()
    try:
        submission = _LoadScopedSubmission(
            session, scope, submission_id, "Submission not found or not in your faculty"
        )
        _ApplyTransition(submission, target_status)
        title = submission.title
        session.commit()

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error updating selection of submission {submission_id}: {str(e)}")
        raise DependencyError("Failed to update submission selection")
    finally:
        session.close()

    action = "Selected" if selected else "Unselected"
    logger.info(f"Coordinator {identity.user_id} {action.lower()} submission {submission_id}")
    LogActivity(db_manager, identity.user_id, ACTION_SELECTION, f'{action} submission "{title}"')

    from submissions import GetSubmission
    return GetSubmission(db_manager, scope, submission_id, now)


def RejectSubmission(db_manager: DatabaseManager, identity: Identity, submission_id: int,
                     now: Optional[datetime] = None) -> dict:
    """
    Reject a selected submission

    Args:
        db_manager: DatabaseManager instance
        identity: Acting manager
        submission_id: Submission to reject
        now: Reference time for the returned review flags

    Returns:
        dict: Updated submission

    Raises:
        AuthError: If the caller is not a manager
        NotFoundError: If the submission is not currently selected
    """
    if identity.role != UserRole.MANAGER:
        raise AuthError("Manager access required", status_code=403)

    scope = ScopeFor(identity.role, identity.user_id, identity.faculty_id)

    session = db_manager.GetSession()
    try:
        submission = _LoadScopedSubmission(session, scope, submission_id, "Submission not found")
        _ApplyTransition(submission, STATUS_REJECTED)
        title = submission.title
        session.commit()

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error rejecting submission {submission_id}: {str(e)}")
        raise DependencyError("Failed to reject submission")
    finally:
        session.close()

    logger.info(f"Manager {identity.user_id} rejected submission {submission_id}")
    LogActivity(db_manager, identity.user_id, ACTION_REJECTION, f'Rejected submission "{title}"')

    # The manager scope only covers selected rows, so read back unrestricted
    from submissions import GetSubmission
    return GetSubmission(db_manager, ScopeFor(UserRole.ADMIN, identity.user_id, None), submission_id, now)
