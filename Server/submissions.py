"""
Magazine Portal Server - Submission Store

This module handles submission records:
- Role-scoped listing, worklist paging and fetch by id
- Creating submissions from an uploaded file (store first, then insert,
  deleting the stored file if anything after the upload fails)
- Coordinator file downloads and the manager's ZIP export

All functions return plain dictionaries to avoid SQLAlchemy session issues.
"""

import io
import math
import logging
import re
import zipfile
from datetime import datetime, timezone
from typing import BinaryIO, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError

from models.database import Submission, User, Faculty, Comment, STATUS_SUBMITTED
from models.auth import Identity, UserRole
from managers.database_manager import DatabaseManager
from role_policy import QueryScope, SubmissionFilters, ScopeFor, ApplyScope, ApplyFilters
from workflow import AsUtc, NeedsComment, NeedsUrgentComment, UrgencyRank
from file_storage import (
    StoreUpload,
    DeleteStoredFile,
    ResolveStoredFile,
    GetContentType,
    DEFAULT_MAX_UPLOAD_BYTES
)
from config import DEFAULT_UPLOAD_ROOT
from activity_log import LogActivity, ACTION_SUBMISSION, ACTION_DOWNLOAD
from exceptions import AuthError, DependencyError, NotFoundError, PortalError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
NOT_IN_FACULTY_MESSAGE = "Submission not found or not in your faculty"


# ==================== Query Helpers ====================

def _BaseQuery(session):
    """
    Submission rows joined to author, faculty and comment count

    Returns:
        tuple: (query, comment_count column expression)
    """
    counts = session.query(
        Comment.submission_id.label("submission_id"),
        func.count(Comment.comment_id).label("comment_count")
    ).group_by(Comment.submission_id).subquery()

    comment_count = func.coalesce(counts.c.comment_count, 0)

    query = session.query(
        Submission,
        User,
        Faculty.faculty_name,
        comment_count.label("comment_count")
    ).join(
        User, Submission.user_id == User.user_id
    ).join(
        Faculty, Submission.faculty_id == Faculty.faculty_id
    ).outerjoin(
        counts, counts.c.submission_id == Submission.submission_id
    )

    return query, comment_count


def _FilteredQuery(session, scope: QueryScope, filters: Optional[SubmissionFilters]):
    query, comment_count = _BaseQuery(session)
    query = ApplyFilters(ApplyScope(query, scope), filters)

    if filters is not None and filters.needs_comment:
        query = query.filter(comment_count == 0)

    return query, comment_count


def SubmissionToDict(submission: Submission, user: Optional[User], faculty_name: Optional[str],
                     comment_count: int, now: Optional[datetime] = None) -> dict:
    """Flatten a submission row with its derived review flags"""
    comment_count = int(comment_count or 0)
    return {
        "submission_id": submission.submission_id,
        "user_id": submission.user_id,
        "faculty_id": submission.faculty_id,
        "title": submission.title,
        "description": submission.description,
        "file_path": submission.file_path,
        "file_type": submission.file_type,
        "academic_year": submission.academic_year,
        "submitted_at": AsUtc(submission.submitted_at),
        "status": submission.status,
        "selected": submission.selected,
        "terms_accepted": submission.terms_accepted,
        "first_name": user.first_name if user else None,
        "last_name": user.last_name if user else None,
        "email": user.email if user else None,
        "faculty_name": faculty_name,
        "comment_count": comment_count,
        "needs_comment": NeedsComment(comment_count),
        "needs_urgent_comment": NeedsUrgentComment(submission.submitted_at, comment_count, now),
    }


# ==================== Listing ====================

def ListSubmissions(db_manager: DatabaseManager, scope: QueryScope,
                    filters: Optional[SubmissionFilters] = None,
                    now: Optional[datetime] = None) -> List[dict]:
    """
    List submissions visible in a scope, newest first

    Args:
        db_manager: DatabaseManager instance
        scope: QueryScope from the role policy
        filters: Optional filters
        now: Reference time for the review flags

    Returns:
        list: Submission dictionaries
    """
    session = db_manager.GetSession()
    try:
        query, _ = _FilteredQuery(session, scope, filters)
        rows = query.order_by(
            Submission.submitted_at.desc(), Submission.submission_id.desc()
        ).all()

        return [SubmissionToDict(s, u, name, count, now) for s, u, name, count in rows]

    except SQLAlchemyError as e:
        logger.error(f"Error listing submissions for scope {scope}: {str(e)}")
        raise DependencyError("Failed to fetch submissions")
    finally:
        session.close()


def ListWorklist(db_manager: DatabaseManager, scope: QueryScope,
                 filters: Optional[SubmissionFilters] = None,
                 page: int = 1, limit: int = DEFAULT_PAGE_SIZE,
                 now: Optional[datetime] = None) -> dict:
    """
    One page of the coordinator worklist

    Urgent uncommented submissions come first, then the rest newest first.

    Args:
        db_manager: DatabaseManager instance
        scope: QueryScope from the role policy
        filters: Optional filters
        page: 1-based page number
        limit: Page size
        now: Reference time for urgency

    Returns:
        dict: submissions, page, limit, total, total_pages

    Raises:
        ValidationError: If page or limit is out of range
    """
    if page < 1:
        raise ValidationError("Page must be at least 1")
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

    session = db_manager.GetSession()
    try:
        query, comment_count = _FilteredQuery(session, scope, filters)
        total = query.count()

        rows = query.order_by(
            UrgencyRank(comment_count, now),
            Submission.submitted_at.desc(),
            Submission.submission_id.desc()
        ).offset((page - 1) * limit).limit(limit).all()

        return {
            "submissions": [SubmissionToDict(s, u, name, count, now) for s, u, name, count in rows],
            "page": page,
            "limit": limit,
            "total": total,
            "total_pages": math.ceil(total / limit),
        }

    except SQLAlchemyError as e:
        logger.error(f"Error fetching worklist for scope {scope}: {str(e)}")
        raise DependencyError("Failed to fetch submissions")
    finally:
        session.close()


def GetSubmission(db_manager: DatabaseManager, scope: QueryScope, submission_id: int,
                  now: Optional[datetime] = None, not_found_message: str = "Submission not found") -> dict:
    """
    Fetch one submission inside a scope

    Raises:
        NotFoundError: If the submission does not exist or is out of scope
    """
    session = db_manager.GetSession()
    try:
        query, _ = _BaseQuery(session)
        row = ApplyScope(query, scope).filter(Submission.submission_id == submission_id).first()

        if row is None:
            raise NotFoundError(not_found_message)

        submission, user, faculty_name, count = row
        return SubmissionToDict(submission, user, faculty_name, count, now)

    except SQLAlchemyError as e:
        logger.error(f"Error fetching submission {submission_id}: {str(e)}")
        raise DependencyError("Failed to fetch submission details")
    finally:
        session.close()


def GetSubmissionDetail(db_manager: DatabaseManager, scope: QueryScope, submission_id: int,
                        now: Optional[datetime] = None,
                        not_found_message: str = "Submission not found") -> dict:
    """
    Fetch one submission with its comments, newest comment first

    Returns:
        dict: {"submission": ..., "comments": [...]}
    """
    from comments import ListComments

    submission = GetSubmission(db_manager, scope, submission_id, now, not_found_message)
    return {
        "submission": submission,
        "comments": ListComments(db_manager, submission_id),
    }


# ==================== Creation ====================

def _TermsAccepted(value) -> bool:
    # Multipart forms send booleans as strings
    return value is True or (isinstance(value, str) and value.strip().lower() == "true")


def CreateSubmission(db_manager: DatabaseManager, identity: Identity,
                     title: Optional[str], description: Optional[str],
                     fileobj: Optional[BinaryIO], filename: Optional[str], content_type: Optional[str],
                     academic_year: Optional[str], terms_accepted,
                     storage_root: str = DEFAULT_UPLOAD_ROOT,
                     max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
                     now: Optional[datetime] = None) -> dict:
    """
    Create a submission from an uploaded file

    The file is written before the row is inserted. If validation or the
    insert fails afterwards, the stored file is deleted (best effort).

    Args:
        db_manager: DatabaseManager instance
        identity: Submitting student
        title: Required title
        description: Optional description
        fileobj: Uploaded file object
        filename: Client-supplied file name
        content_type: Client-supplied MIME type
        academic_year: Required academic year, e.g. 2024-2025
        terms_accepted: Must be True or the string "true"
        storage_root: Upload root directory
        max_bytes: Upload size cap
        now: Submission time (defaults to current UTC time)

    Returns:
        dict: The new submission

    Raises:
        AuthError: If the caller is not a student
        ValidationError: If a field is missing, terms are not accepted, or the file is rejected
        DependencyError: If the file or row cannot be written
    """
    if identity.role != UserRole.STUDENT:
        raise AuthError("Student access required", status_code=403)

    if fileobj is None or not filename:
        raise ValidationError("Required fields missing")

    relative_path, file_type, size = StoreUpload(
        fileobj, filename, content_type, identity.user_id, storage_root, max_bytes
    )

    session = db_manager.GetSession()
    try:
        title = (title or "").strip()
        academic_year = (academic_year or "").strip()

        if not title or not academic_year:
            raise ValidationError("Required fields missing")

        if not _TermsAccepted(terms_accepted):
            raise ValidationError("Terms and conditions must be accepted")

        owner = session.query(User).filter(User.user_id == identity.user_id).first()
        if owner is None:
            raise NotFoundError("User not found")

        submission = Submission(
            user_id=owner.user_id,
            faculty_id=owner.faculty_id,
            title=title,
            description=(description or "").strip() or None,
            file_path=relative_path,
            file_type=file_type,
            academic_year=academic_year,
            submitted_at=now or datetime.now(timezone.utc),
            status=STATUS_SUBMITTED,
            selected=False,
            terms_accepted=True
        )
        session.add(submission)
        session.commit()
        submission_id = submission.submission_id

    except PortalError:
        session.rollback()
        DeleteStoredFile(relative_path, storage_root)
        raise
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error creating submission for user {identity.user_id}: {str(e)}")
        DeleteStoredFile(relative_path, storage_root)
        raise DependencyError("Failed to create submission")
    finally:
        session.close()

    logger.info(f"User {identity.user_id} created submission {submission_id} ({file_type}, {size} bytes)")
    LogActivity(db_manager, identity.user_id, ACTION_SUBMISSION, f'Submitted "{title}"')

    return GetSubmission(db_manager, QueryScope(owner_user_id=identity.user_id), submission_id, now)


# ==================== Downloads ====================

def _SafeName(value: str) -> str:
    return re.sub(r'[^A-Za-z0-9 _.-]+', '_', value).strip() or "submission"


def GetDownload(db_manager: DatabaseManager, identity: Identity, submission_id: int,
                storage_root: str = DEFAULT_UPLOAD_ROOT) -> dict:
    """
    Resolve a submission file for download inside the caller's scope

    Returns:
        dict: path, filename, content_type

    Raises:
        NotFoundError: If the submission is out of scope or the file is missing
    """
    scope = ScopeFor(identity.role, identity.user_id, identity.faculty_id)

    session = db_manager.GetSession()
    try:
        submission = ApplyScope(
            session.query(Submission).filter(Submission.submission_id == submission_id),
            scope
        ).first()

        if submission is None:
            raise NotFoundError(NOT_IN_FACULTY_MESSAGE)

        title = submission.title
        file_type = submission.file_type
        file_path = ResolveStoredFile(submission.file_path, storage_root)

    except SQLAlchemyError as e:
        logger.error(f"Error loading submission {submission_id} for download: {str(e)}")
        raise DependencyError("Failed to download file")
    finally:
        session.close()

    if not file_path.is_file():
        logger.error(f"Submission {submission_id} exists in database but its file is missing on disk")
        raise NotFoundError("File not found")

    LogActivity(db_manager, identity.user_id, ACTION_DOWNLOAD, f'Downloaded submission file for "{title}"')

    return {
        "path": file_path,
        "filename": f"{_SafeName(title)}.{file_type}",
        "content_type": GetContentType(file_type),
    }


def BuildSubmissionArchive(db_manager: DatabaseManager, identity: Identity,
                           storage_root: str = DEFAULT_UPLOAD_ROOT) -> Tuple[bytes, int]:
    """
    Build a ZIP archive of every submission visible to a manager

    Files are grouped into one folder per faculty. Rows whose file is
    missing on disk are skipped and logged.

    Returns:
        tuple: (zip bytes, number of files added)
    """
    scope = ScopeFor(identity.role, identity.user_id, identity.faculty_id)
    submissions = ListSubmissions(db_manager, scope)

    zip_buffer = io.BytesIO()
    added = 0

    with zipfile.ZipFile(zip_buffer, 'w', zipfile.ZIP_DEFLATED) as zip_file:
        for submission in submissions:
            file_path = ResolveStoredFile(submission["file_path"], storage_root)
            if not file_path.is_file():
                logger.warning(f"Skipping submission {submission['submission_id']}: file missing on disk")
                continue

            arcname = "{}/{}-{}.{}".format(
                _SafeName(submission["faculty_name"] or "Unknown"),
                submission["submission_id"],
                _SafeName(submission["title"]),
                submission["file_type"]
            )
            zip_file.write(file_path, arcname)
            added += 1

    LogActivity(db_manager, identity.user_id, ACTION_DOWNLOAD, f"Downloaded {added} selected submissions as ZIP")
    logger.info(f"User {identity.user_id} exported {added} submissions as ZIP")

    return zip_buffer.getvalue(), added
