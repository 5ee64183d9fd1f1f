"""
Magazine Portal Server - Reporting

Dashboard statistics, faculty reports and user management queries for the
admin, manager and coordinator views.

All functions return plain dictionaries to avoid SQLAlchemy session issues.
"""

import math
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import func, distinct, case, and_, or_
from sqlalchemy.exc import SQLAlchemyError

from models.database import User, Role, Faculty, Submission, Comment, STATUS_SUBMITTED, STATUS_SELECTED
from models.auth import Identity, UserRole, NormalizeRole
from managers.database_manager import DatabaseManager
from workflow import AsUtc, URGENT_COMMENT_WINDOW
from role_policy import ContainsPattern, LIKE_ESCAPE
from activity_log import LogActivity, ACTION_ROLE_UPDATED
from exceptions import DependencyError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100


def _CommentCounts(session):
    return session.query(
        Comment.submission_id.label("submission_id"),
        func.count(Comment.comment_id).label("comment_count")
    ).group_by(Comment.submission_id).subquery()


def _RequireFaculty(identity: Identity) -> int:
    if not identity.faculty_id:
        raise NotFoundError("Faculty information not found")
    return identity.faculty_id


# ==================== Faculties ====================

def ListFaculties(db_manager: DatabaseManager) -> List[dict]:
    """List all faculties ordered by name"""
    session = db_manager.GetSession()
    try:
        faculties = session.query(Faculty).order_by(Faculty.faculty_name.asc()).all()
        return [
            {
                "faculty_id": faculty.faculty_id,
                "faculty_name": faculty.faculty_name,
                "description": faculty.description,
            }
            for faculty in faculties
        ]
    except SQLAlchemyError as e:
        logger.error(f"Error fetching faculties: {str(e)}")
        raise DependencyError("Failed to retrieve faculties")
    finally:
        session.close()


def GetFaculty(db_manager: DatabaseManager, faculty_id: Optional[int]) -> dict:
    """
    Get one faculty

    Raises:
        NotFoundError: If the faculty does not exist
    """
    if not faculty_id:
        raise NotFoundError("Faculty information not found")

    session = db_manager.GetSession()
    try:
        faculty = session.query(Faculty).filter(Faculty.faculty_id == faculty_id).first()
        if faculty is None:
            raise NotFoundError("Faculty information not found")

        return {
            "faculty_id": faculty.faculty_id,
            "faculty_name": faculty.faculty_name,
            "description": faculty.description,
        }
    except SQLAlchemyError as e:
        logger.error(f"Error fetching faculty {faculty_id}: {str(e)}")
        raise DependencyError("Failed to fetch faculty information")
    finally:
        session.close()


# ==================== Dashboards ====================

def GetAdminDashboardStats(db_manager: DatabaseManager) -> dict:
    """
    Portal-wide counts for the admin dashboard

    Returns:
        dict: total_users, total_submissions, pending_submissions, selected_submissions
    """
    session = db_manager.GetSession()
    try:
        return {
            "total_users": session.query(func.count(User.user_id)).scalar(),
            "total_submissions": session.query(func.count(Submission.submission_id)).scalar(),
            "pending_submissions": session.query(func.count(Submission.submission_id)).filter(
                Submission.status == STATUS_SUBMITTED
            ).scalar(),
            "selected_submissions": session.query(func.count(Submission.submission_id)).filter(
                Submission.status == STATUS_SELECTED
            ).scalar(),
        }
    except SQLAlchemyError as e:
        logger.error(f"Error fetching admin dashboard stats: {str(e)}")
        raise DependencyError("Failed to fetch dashboard statistics")
    finally:
        session.close()


def GetManagerDashboardStats(db_manager: DatabaseManager) -> dict:
    """
    Cross-faculty counts for the manager dashboard

    Returns:
        dict: total_submissions, selected_submissions, pending_selections, total_contributors
    """
    session = db_manager.GetSession()
    try:
        return {
            "total_submissions": session.query(func.count(Submission.submission_id)).scalar(),
            "selected_submissions": session.query(func.count(Submission.submission_id)).filter(
                Submission.status == STATUS_SELECTED
            ).scalar(),
            "pending_selections": session.query(func.count(Submission.submission_id)).filter(
                Submission.status == STATUS_SUBMITTED
            ).scalar(),
            "total_contributors": session.query(func.count(distinct(Submission.user_id))).scalar(),
        }
    except SQLAlchemyError as e:
        logger.error(f"Error fetching manager dashboard stats: {str(e)}")
        raise DependencyError("Failed to fetch dashboard statistics")
    finally:
        session.close()


def _FacultyStatsQuery(session, now: datetime):
    counts = _CommentCounts(session)
    cutoff = now - URGENT_COMMENT_WINDOW

    pending = case(
        (and_(Submission.submitted_at > cutoff, func.coalesce(counts.c.comment_count, 0) == 0),
         Submission.submission_id)
    )

    return session.query(
        Faculty.faculty_id,
        Faculty.faculty_name,
        func.count(distinct(Submission.submission_id)).label("submission_count"),
        func.count(distinct(case((Submission.status == STATUS_SELECTED, Submission.submission_id)))).label("selected_count"),
        func.count(distinct(Submission.user_id)).label("contributor_count"),
        func.count(distinct(pending)).label("pending_comment_count")
    ).outerjoin(
        Submission, Submission.faculty_id == Faculty.faculty_id
    ).outerjoin(
        counts, counts.c.submission_id == Submission.submission_id
    ).group_by(
        Faculty.faculty_id, Faculty.faculty_name
    )


def _FacultyRowToDict(row) -> dict:
    return {
        "faculty_id": row.faculty_id,
        "faculty_name": row.faculty_name,
        "submission_count": row.submission_count,
        "selected_count": row.selected_count,
        "contributor_count": row.contributor_count,
        "pending_comment_count": row.pending_comment_count,
    }


def GetFacultyStats(db_manager: DatabaseManager, now: Optional[datetime] = None) -> List[dict]:
    """
    Submission, selection and contributor counts for every faculty, by name

    Returns:
        list: One dictionary per faculty, including faculties with no submissions
    """
    now = AsUtc(now) if now else datetime.now(timezone.utc)

    session = db_manager.GetSession()
    try:
        rows = _FacultyStatsQuery(session, now).order_by(Faculty.faculty_name.asc()).all()
        return [_FacultyRowToDict(row) for row in rows]
    except SQLAlchemyError as e:
        logger.error(f"Error fetching faculty stats: {str(e)}")
        raise DependencyError("Failed to fetch faculty statistics")
    finally:
        session.close()


def GetFacultyReport(db_manager: DatabaseManager, identity: Identity, now: Optional[datetime] = None) -> dict:
    """
    Statistics for the coordinator's own faculty

    Raises:
        NotFoundError: If the coordinator has no faculty
    """
    faculty_id = _RequireFaculty(identity)
    now = AsUtc(now) if now else datetime.now(timezone.utc)

    session = db_manager.GetSession()
    try:
        row = _FacultyStatsQuery(session, now).filter(Faculty.faculty_id == faculty_id).first()
        if row is None:
            raise NotFoundError("Faculty information not found")
        return _FacultyRowToDict(row)
    except SQLAlchemyError as e:
        logger.error(f"Error generating faculty report for faculty {faculty_id}: {str(e)}")
        raise DependencyError("Failed to generate faculty report")
    finally:
        session.close()


def GetCoordinatorDashboardStats(db_manager: DatabaseManager, identity: Identity,
                                 now: Optional[datetime] = None) -> dict:
    """
    Counts for the coordinator dashboard

    pending_comments counts uncommented submissions still inside the
    urgent comment window.

    Returns:
        dict: faculty_id, total_submissions, pending_comments, selected_submissions, total_contributors
    """
    report = GetFacultyReport(db_manager, identity, now)
    return {
        "faculty_id": report["faculty_id"],
        "total_submissions": report["submission_count"],
        "pending_comments": report["pending_comment_count"],
        "selected_submissions": report["selected_count"],
        "total_contributors": report["contributor_count"],
    }


def ListFacultyStudents(db_manager: DatabaseManager, identity: Identity) -> List[dict]:
    """
    Students in the coordinator's faculty with submission counts, by last name
    """
    faculty_id = _RequireFaculty(identity)

    session = db_manager.GetSession()
    try:
        rows = session.query(
            User.user_id,
            User.first_name,
            User.last_name,
            User.email,
            func.count(Submission.submission_id).label("submission_count"),
            func.count(case((Submission.status == STATUS_SELECTED, 1))).label("selected_count")
        ).outerjoin(
            Submission, Submission.user_id == User.user_id
        ).filter(
            User.faculty_id == faculty_id,
            User.role_id == UserRole.STUDENT.role_id
        ).group_by(
            User.user_id, User.first_name, User.last_name, User.email
        ).order_by(
            User.last_name.asc(), User.first_name.asc()
        ).all()

        return [
            {
                "user_id": row.user_id,
                "first_name": row.first_name,
                "last_name": row.last_name,
                "email": row.email,
                "submission_count": row.submission_count,
                "selected_count": row.selected_count,
            }
            for row in rows
        ]
    except SQLAlchemyError as e:
        logger.error(f"Error fetching students for faculty {faculty_id}: {str(e)}")
        raise DependencyError("Failed to fetch students")
    finally:
        session.close()


# ==================== User Management ====================

def _UserSummaryToDict(user: User, faculty_name: Optional[str], role_name: Optional[str]) -> dict:
    return {
        "user_id": user.user_id,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "email": user.email,
        "faculty_id": user.faculty_id,
        "faculty_name": faculty_name,
        "role_id": user.role_id,
        "role_name": role_name,
        "role": NormalizeRole(user.role_id),
        "created_at": AsUtc(user.created_at),
        "last_login": AsUtc(user.last_login),
    }


def _UserSummaryQuery(session):
    return session.query(User, Faculty.faculty_name, Role.role_name).outerjoin(
        Faculty, User.faculty_id == Faculty.faculty_id
    ).outerjoin(
        Role, User.role_id == Role.role_id
    )


def GetUserProfile(db_manager: DatabaseManager, user_id: int) -> dict:
    """
    Get one user with faculty and role names

    Raises:
        NotFoundError: If the user does not exist
    """
    session = db_manager.GetSession()
    try:
        row = _UserSummaryQuery(session).filter(User.user_id == user_id).first()
        if row is None:
            raise NotFoundError("User not found")
        return _UserSummaryToDict(*row)
    except SQLAlchemyError as e:
        logger.error(f"Error fetching user {user_id}: {str(e)}")
        raise DependencyError("Failed to fetch user data")
    finally:
        session.close()


def ListUsers(db_manager: DatabaseManager, page: int = 1, limit: int = 10, search: Optional[str] = None) -> dict:
    """
    Page through users, newest account first, with optional search

    Args:
        db_manager: DatabaseManager instance
        page: 1-based page number
        limit: Page size
        search: Case-insensitive match on first name, last name or email

    Returns:
        dict: users, total, page, limit, total_pages
    """
    if page < 1:
        raise ValidationError("Page must be at least 1")
    if limit < 1 or limit > MAX_PAGE_SIZE:
        raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}")

    session = db_manager.GetSession()
    try:
        query = _UserSummaryQuery(session)

        search = (search or "").strip().lower()
        if search:
            pattern = ContainsPattern(search)
            query = query.filter(or_(
                func.lower(User.first_name).like(pattern, escape=LIKE_ESCAPE),
                func.lower(User.last_name).like(pattern, escape=LIKE_ESCAPE),
                func.lower(User.email).like(pattern, escape=LIKE_ESCAPE)
            ))

        total = query.count()
        rows = query.order_by(
            User.created_at.desc(), User.user_id.desc()
        ).offset((page - 1) * limit).limit(limit).all()

        return {
            "users": [_UserSummaryToDict(*row) for row in rows],
            "total": total,
            "page": page,
            "limit": limit,
            "total_pages": math.ceil(total / limit),
        }
    except SQLAlchemyError as e:
        logger.error(f"Error fetching users: {str(e)}")
        raise DependencyError("Failed to fetch users")
    finally:
        session.close()


def UpdateUserRole(db_manager: DatabaseManager, identity: Identity, user_id: int, role_value) -> dict:
    """
    Change a user's role

    Args:
        db_manager: DatabaseManager instance
        identity: Acting admin
        user_id: User to update
        role_value: Role id, legacy code or role name

    Returns:
        dict: Updated user summary

    Raises:
        ValidationError: If the role is unknown or the admin targets their own account
        NotFoundError: If the user does not exist
    """
    role = NormalizeRole(role_value)
    if role is None:
        raise ValidationError(f"Invalid role: {role_value}")

    if user_id == identity.user_id:
        raise ValidationError("Cannot change your own role")

    session = db_manager.GetSession()
    try:
        user = session.query(User).filter(User.user_id == user_id).first()
        if user is None:
            raise NotFoundError("User not found")

        previous = NormalizeRole(user.role_id)
        user.role_id = role.role_id
        session.commit()
        email = user.email

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error updating role for user {user_id}: {str(e)}")
        raise DependencyError("Failed to update user role")
    finally:
        session.close()

    previous_name = previous.value if previous else "unknown"
    logger.info(f"Admin {identity.user_id} changed role of '{email}' from {previous_name} to {role.value}")
    LogActivity(
        db_manager, identity.user_id, ACTION_ROLE_UPDATED,
        f"Changed role of {email} from {previous_name} to {role.value}"
    )

    return GetUserProfile(db_manager, user_id)
