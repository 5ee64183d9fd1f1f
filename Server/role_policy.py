"""
Magazine Portal Server - Role Policy

Maps a caller's role to the set of submissions it may see and act on.
Out-of-scope rows are filtered out of every query, so a request for one
behaves exactly like a request for a row that does not exist.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import or_

from models.database import Submission, User, STATUS_SELECTED, SUBMISSION_STATUSES
from models.auth import UserRole
from exceptions import NotFoundError, ValidationError


@dataclass(frozen=True)
class QueryScope:
    """Row restrictions implied by a role; None means unrestricted"""
    owner_user_id: Optional[int] = None
    faculty_id: Optional[int] = None
    status: Optional[str] = None


@dataclass
class SubmissionFilters:
    """Optional filters that compose with any scope"""
    academic_year: Optional[str] = None
    search: Optional[str] = None
    status: Optional[str] = None
    needs_comment: bool = False
    search_author_names: bool = False


def ScopeFor(role: UserRole, user_id: int, faculty_id: Optional[int],
             faculty_filter: Optional[int] = None) -> QueryScope:
    """
    Compute the submission scope for a caller

    Args:
        role: Caller's role
        user_id: Caller's user id
        faculty_id: Caller's faculty id
        faculty_filter: Explicit faculty filter, honoured for admins only

    Returns:
        QueryScope: Restrictions to apply to submission queries

    Raises:
        NotFoundError: If a coordinator has no faculty
    """
    if role == UserRole.ADMIN:
        return QueryScope(faculty_id=faculty_filter)

    if role == UserRole.MANAGER:
        return QueryScope(status=STATUS_SELECTED)

    if role == UserRole.COORDINATOR:
        if not faculty_id:
            raise NotFoundError("Faculty information not found")
        return QueryScope(faculty_id=faculty_id)

    return QueryScope(owner_user_id=user_id)


def PublicScope(faculty_filter: Optional[int] = None) -> QueryScope:
    """Scope for unauthenticated visitors: selected submissions only"""
    return QueryScope(faculty_id=faculty_filter, status=STATUS_SELECTED)


def ApplyScope(query, scope: QueryScope):
    """
    Restrict a query over Submission to a scope

    Args:
        query: SQLAlchemy query selecting from submissions
        scope: QueryScope to apply

    Returns:
        Query: Filtered query
    """
    if scope.owner_user_id is not None:
        query = query.filter(Submission.user_id == scope.owner_user_id)
    if scope.faculty_id is not None:
        query = query.filter(Submission.faculty_id == scope.faculty_id)
    if scope.status is not None:
        query = query.filter(Submission.status == scope.status)
    return query


LIKE_ESCAPE = "\\"


def ContainsPattern(search: str) -> str:
    """Build a LIKE pattern matching search as literal text anywhere in a column"""
    escaped = search.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2).replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def ApplyFilters(query, filters: Optional[SubmissionFilters]):
    """
    Apply optional academic year, status and search filters

    needs_comment is applied by the caller, which owns the comment count
    subquery. Author name search requires the query to be joined to User.

    Args:
        query: SQLAlchemy query selecting from submissions
        filters: SubmissionFilters, or None

    Returns:
        Query: Filtered query

    Raises:
        ValidationError: If the status filter is not a known status
    """
    if filters is None:
        return query

    if filters.academic_year:
        query = query.filter(Submission.academic_year == filters.academic_year)

    if filters.status:
        if filters.status not in SUBMISSION_STATUSES:
            raise ValidationError(f"Invalid status. Must be one of: {', '.join(SUBMISSION_STATUSES)}")
        query = query.filter(Submission.status == filters.status)

    search = (filters.search or "").strip()
    if search:
        pattern = ContainsPattern(search)
        conditions = [
            Submission.title.ilike(pattern, escape=LIKE_ESCAPE),
            Submission.description.ilike(pattern, escape=LIKE_ESCAPE)
        ]
        if filters.search_author_names:
            conditions.extend([
                User.first_name.ilike(pattern, escape=LIKE_ESCAPE),
                User.last_name.ilike(pattern, escape=LIKE_ESCAPE)
            ])
        query = query.filter(or_(*conditions))

    return query
