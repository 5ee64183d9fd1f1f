"""
Magazine Portal Server - Comment Store

Append-only review comments. Comments are listed newest first and a new
comment is never timestamped before the latest one on the same submission.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from models.database import Comment, Submission, User
from models.auth import Identity, UserRole, NormalizeRole
from managers.database_manager import DatabaseManager
from role_policy import ScopeFor, ApplyScope
from workflow import AsUtc
from activity_log import LogActivity, ACTION_COMMENT
from exceptions import AuthError, DependencyError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _CommentToDict(comment: Comment, user: Optional[User]) -> dict:
    return {
        "comment_id": comment.comment_id,
        "submission_id": comment.submission_id,
        "user_id": comment.user_id,
        "comment_text": comment.comment_text,
        "commented_at": AsUtc(comment.commented_at),
        "is_read": comment.is_read,
        "first_name": user.first_name if user else None,
        "last_name": user.last_name if user else None,
        "role": NormalizeRole(user.role_id) if user else None,
    }


def AddComment(db_manager: DatabaseManager, identity: Identity, submission_id: int, text: Optional[str],
               now: Optional[datetime] = None) -> dict:
    """
    Add a review comment to a submission in the coordinator's faculty

    Args:
        db_manager: DatabaseManager instance
        identity: Commenting coordinator
        submission_id: Target submission
        text: Comment text
        now: Comment time (defaults to current UTC time)

    Returns:
        dict: The new comment with author details

    Raises:
        ValidationError: If the text is blank
        AuthError: If the caller is not a coordinator
        NotFoundError: If the submission is not in the coordinator's faculty
    """
    text = (text or "").strip()
    if not text:
        raise ValidationError("Comment text is required")

    if identity.role != UserRole.COORDINATOR:
        raise AuthError("Coordinator access required", status_code=403)

    scope = ScopeFor(identity.role, identity.user_id, identity.faculty_id)
    now = AsUtc(now) if now else datetime.now(timezone.utc)

    session = db_manager.GetSession()
    try:
        submission = ApplyScope(
            session.query(Submission).filter(Submission.submission_id == submission_id),
            scope
        ).first()

        if submission is None:
            raise NotFoundError("Submission not found or not in your faculty")

        latest = session.query(func.max(Comment.commented_at)).filter(
            Comment.submission_id == submission_id
        ).scalar()
        if latest is not None and AsUtc(latest) > now:
            now = AsUtc(latest)

        comment = Comment(
            submission_id=submission_id,
            user_id=identity.user_id,
            comment_text=text,
            commented_at=now,
            is_read=False
        )
        session.add(comment)
        session.commit()

        author = session.query(User).filter(User.user_id == identity.user_id).first()
        comment_data = _CommentToDict(comment, author)

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error adding comment to submission {submission_id}: {str(e)}")
        raise DependencyError("Failed to add comment")
    finally:
        session.close()

    logger.info(f"Coordinator {identity.user_id} commented on submission {submission_id}")
    LogActivity(db_manager, identity.user_id, ACTION_COMMENT, f"Added comment to submission #{submission_id}")

    return comment_data


def ListComments(db_manager: DatabaseManager, submission_id: int) -> List[dict]:
    """
    List comments on a submission, newest first, with author name and role

    Scope is checked by the caller when it fetches the submission.
    """
    session = db_manager.GetSession()
    try:
        rows = session.query(Comment, User).outerjoin(
            User, Comment.user_id == User.user_id
        ).filter(
            Comment.submission_id == submission_id
        ).order_by(
            Comment.commented_at.desc(), Comment.comment_id.desc()
        ).all()

        return [_CommentToDict(comment, user) for comment, user in rows]

    except SQLAlchemyError as e:
        logger.error(f"Error fetching comments for submission {submission_id}: {str(e)}")
        raise DependencyError("Failed to fetch comments")
    finally:
        session.close()
