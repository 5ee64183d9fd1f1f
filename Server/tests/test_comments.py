"""
Tests for coordinator review comments
"""

from datetime import datetime, timedelta, timezone

import pytest

from models.auth import UserRole
from comments import AddComment, ListComments
from submissions import GetSubmission
from role_policy import ScopeFor
from exceptions import AuthError, NotFoundError, ValidationError


def test_comment_clears_needs_comment(db_manager, make_user, make_submission):
    student = make_user()
    coordinator = make_user(UserRole.COORDINATOR)
    submission_id = make_submission(student)
    scope = ScopeFor(coordinator.role, coordinator.user_id, coordinator.faculty_id)

    before = GetSubmission(db_manager, scope, submission_id)
    assert before["needs_comment"] is True
    assert before["needs_urgent_comment"] is True

    comment = AddComment(db_manager, coordinator, submission_id, "  Strong opening paragraph  ")
    assert comment["comment_text"] == "Strong opening paragraph"
    assert comment["is_read"] is False
    assert comment["role"] == UserRole.COORDINATOR

    after = GetSubmission(db_manager, scope, submission_id)
    assert after["comment_count"] == 1
    assert after["needs_comment"] is False
    assert after["needs_urgent_comment"] is False


def test_comments_listed_newest_first(db_manager, make_user, make_submission):
    coordinator = make_user(UserRole.COORDINATOR, first_name="Grace", last_name="Hopper")
    submission_id = make_submission(make_user())
    start = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)

    AddComment(db_manager, coordinator, submission_id, "first", now=start)
    AddComment(db_manager, coordinator, submission_id, "second", now=start + timedelta(minutes=5))

    comments = ListComments(db_manager, submission_id)

    assert [c["comment_text"] for c in comments] == ["second", "first"]
    assert comments[0]["first_name"] == "Grace"
    assert comments[0]["last_name"] == "Hopper"


def test_comment_timestamps_never_go_backwards(db_manager, make_user, make_submission):
    """A comment stamped earlier than the latest one takes the latest time"""
    coordinator = make_user(UserRole.COORDINATOR)
    submission_id = make_submission(make_user())
    start = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)

    AddComment(db_manager, coordinator, submission_id, "later", now=start + timedelta(hours=1))
    earlier = AddComment(db_manager, coordinator, submission_id, "clock skew", now=start)

    assert earlier["commented_at"] == start + timedelta(hours=1)

    comments = ListComments(db_manager, submission_id)
    assert comments[0]["comment_text"] == "clock skew"


@pytest.mark.parametrize("text", [None, "", "   "])
def test_blank_comment_is_rejected(db_manager, make_user, make_submission, text):
    coordinator = make_user(UserRole.COORDINATOR)
    submission_id = make_submission(make_user())

    with pytest.raises(ValidationError) as exc_info:
        AddComment(db_manager, coordinator, submission_id, text)

    assert exc_info.value.message == "Comment text is required"
    assert ListComments(db_manager, submission_id) == []


def test_comment_outside_faculty_is_not_found(db_manager, make_user, make_submission):
    submission_id = make_submission(make_user(faculty_id=1))
    coordinator = make_user(UserRole.COORDINATOR, faculty_id=3)

    with pytest.raises(NotFoundError):
        AddComment(db_manager, coordinator, submission_id, "Nice work")


def test_only_coordinators_comment(db_manager, make_user, make_submission):
    student = make_user()
    submission_id = make_submission(student)

    with pytest.raises(AuthError):
        AddComment(db_manager, student, submission_id, "Self review")
