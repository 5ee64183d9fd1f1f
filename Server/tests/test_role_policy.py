"""
Tests for role-based submission scoping and worklist ordering
"""

from datetime import datetime, timedelta, timezone

import pytest

from models.auth import UserRole
from models.database import STATUS_SELECTED, STATUS_REJECTED
from role_policy import ScopeFor, PublicScope, QueryScope, SubmissionFilters
from submissions import ListSubmissions, ListWorklist, GetSubmission
from comments import AddComment
from exceptions import NotFoundError, ValidationError

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _ids(rows):
    return [row["submission_id"] for row in rows]


@pytest.fixture
def portfolio(make_user, make_submission):
    """Two students in different faculties with a mix of statuses"""
    arts = make_user(faculty_id=1)
    science = make_user(faculty_id=2)

    return {
        "arts": arts,
        "science": science,
        "arts_draft": make_submission(arts, title="Arts draft", submitted_at=NOW - timedelta(days=1)),
        "arts_selected": make_submission(arts, title="Arts pick", status=STATUS_SELECTED,
                                         submitted_at=NOW - timedelta(days=2)),
        "science_selected": make_submission(science, title="Science pick", status=STATUS_SELECTED,
                                            submitted_at=NOW - timedelta(days=3)),
        "science_rejected": make_submission(science, title="Science reject", status=STATUS_REJECTED,
                                            submitted_at=NOW - timedelta(days=4)),
    }


def test_scope_for_each_role():
    assert ScopeFor(UserRole.ADMIN, 1, None) == QueryScope()
    assert ScopeFor(UserRole.ADMIN, 1, None, faculty_filter=3) == QueryScope(faculty_id=3)
    assert ScopeFor(UserRole.MANAGER, 2, 1, faculty_filter=3) == QueryScope(status=STATUS_SELECTED)
    assert ScopeFor(UserRole.COORDINATOR, 3, 4, faculty_filter=5) == QueryScope(faculty_id=4)
    assert ScopeFor(UserRole.STUDENT, 9, 1) == QueryScope(owner_user_id=9)


def test_coordinator_without_faculty_is_rejected():
    with pytest.raises(NotFoundError):
        ScopeFor(UserRole.COORDINATOR, 3, None)


def test_student_sees_only_own_submissions(db_manager, portfolio):
    arts = portfolio["arts"]
    rows = ListSubmissions(db_manager, ScopeFor(arts.role, arts.user_id, arts.faculty_id), now=NOW)

    assert _ids(rows) == [portfolio["arts_draft"], portfolio["arts_selected"]]


def test_manager_sees_only_selected(db_manager, portfolio):
    rows = ListSubmissions(db_manager, ScopeFor(UserRole.MANAGER, 1, None), now=NOW)

    assert _ids(rows) == [portfolio["arts_selected"], portfolio["science_selected"]]
    assert all(row["selected"] for row in rows)


def test_public_scope_filters_by_faculty(db_manager, portfolio):
    rows = ListSubmissions(db_manager, PublicScope(2), now=NOW)

    assert _ids(rows) == [portfolio["science_selected"]]


def test_admin_sees_everything(db_manager, portfolio):
    rows = ListSubmissions(db_manager, ScopeFor(UserRole.ADMIN, 1, None), now=NOW)

    assert len(rows) == 4


def test_out_of_scope_fetch_is_not_found(db_manager, portfolio):
    coordinator_scope = ScopeFor(UserRole.COORDINATOR, 3, 1)

    with pytest.raises(NotFoundError):
        GetSubmission(db_manager, coordinator_scope, portfolio["science_selected"])


def test_search_matches_title_and_optionally_author(db_manager, make_user, make_submission):
    student = make_user(first_name="Zelda", last_name="Fitzgerald")
    make_submission(student, title="Jazz age notes")
    scope = ScopeFor(UserRole.ADMIN, 1, None)

    assert len(ListSubmissions(db_manager, scope, SubmissionFilters(search="jazz"))) == 1
    assert ListSubmissions(db_manager, scope, SubmissionFilters(search="zelda")) == []
    assert len(ListSubmissions(db_manager, scope, SubmissionFilters(search="zelda", search_author_names=True))) == 1


def test_search_treats_wildcards_as_literal_text(db_manager, make_user, make_submission):
    student = make_user(first_name="Zelda", last_name="Fitzgerald")
    make_submission(student, title="Jazz age notes")
    discount = make_submission(student, title="50% off", description="snake_case")
    scope = ScopeFor(UserRole.ADMIN, 1, None)

    assert _ids(ListSubmissions(db_manager, scope, SubmissionFilters(search="%"))) == [discount]
    assert _ids(ListSubmissions(db_manager, scope, SubmissionFilters(search="_"))) == [discount]
    assert _ids(ListSubmissions(db_manager, scope, SubmissionFilters(search="0% o"))) == [discount]
    assert ListSubmissions(db_manager, scope, SubmissionFilters(search="\\")) == []
    assert ListSubmissions(db_manager, scope, SubmissionFilters(search="z_a", search_author_names=True)) == []


def test_unknown_status_filter_is_rejected(db_manager):
    with pytest.raises(ValidationError):
        ListSubmissions(db_manager, QueryScope(), SubmissionFilters(status="Published"))


def test_worklist_puts_urgent_uncommented_first(db_manager, make_user, make_submission):
    student = make_user()
    coordinator = make_user(UserRole.COORDINATOR)
    scope = ScopeFor(coordinator.role, coordinator.user_id, coordinator.faculty_id)

    old = make_submission(student, title="old", submitted_at=NOW - timedelta(days=30))
    recent_commented = make_submission(student, title="commented", submitted_at=NOW - timedelta(hours=1))
    urgent = make_submission(student, title="urgent", submitted_at=NOW - timedelta(days=5))
    AddComment(db_manager, coordinator, recent_commented, "Reviewed", now=NOW)

    page = ListWorklist(db_manager, scope, now=NOW)

    assert _ids(page["submissions"]) == [urgent, recent_commented, old]
    assert page["total"] == 3
    assert page["total_pages"] == 1

    pending = ListWorklist(db_manager, scope, SubmissionFilters(needs_comment=True), now=NOW)
    assert _ids(pending["submissions"]) == [urgent, old]


def test_worklist_paging(db_manager, make_user, make_submission):
    student = make_user()
    scope = ScopeFor(UserRole.COORDINATOR, 1, 1)
    for day in range(5):
        make_submission(student, title=f"piece {day}", submitted_at=NOW - timedelta(days=20 + day))

    page = ListWorklist(db_manager, scope, page=2, limit=2, now=NOW)

    assert page["total"] == 5
    assert page["total_pages"] == 3
    assert [row["title"] for row in page["submissions"]] == ["piece 2", "piece 3"]


@pytest.mark.parametrize("page, limit", [(0, 10), (1, 0), (1, 101)])
def test_worklist_rejects_bad_paging(db_manager, page, limit):
    with pytest.raises(ValidationError):
        ListWorklist(db_manager, QueryScope(faculty_id=1), page=page, limit=limit)
