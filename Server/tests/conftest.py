"""
Shared fixtures for Magazine Portal Server tests

Each test gets its own SQLite database and upload directory under tmp_path.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from fastapi.testclient import TestClient

from config import ServerConfig
from managers.database_manager import DatabaseManager
from models.database import User, Submission, STATUS_SUBMITTED
from models.auth import UserRole, Identity
from auth import CreateAccessToken
from server import CreateApp


TEST_PASSWORD = "correct-horse-battery"
TEST_PASSWORD_HASH = DatabaseManager.HashPassword(TEST_PASSWORD)


@pytest.fixture
def config(tmp_path):
    return ServerConfig(
        database_url=f"sqlite:///{tmp_path / 'portal.db'}",
        jwt_secret="test-secret",
        upload_root=str(tmp_path / "uploads"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def db_manager(config):
    manager = DatabaseManager(config.database_url)
    manager.InitializeDatabase()
    yield manager
    manager.Dispose()


@pytest.fixture
def client(config, db_manager):
    app = CreateApp(config, db_manager)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user(db_manager):
    """Factory creating a user row and returning its Identity"""
    counter = {"n": 0}

    def _make_user(role: UserRole = UserRole.STUDENT, faculty_id: int = 1, email: str = None,
                   password: str = None, first_name: str = "Test", last_name: str = "User") -> Identity:
        counter["n"] += 1
        email = email or f"{role.value.lower()}{counter['n']}@university.edu"

        session = db_manager.GetSession()
        try:
            user = User(
                first_name=first_name,
                last_name=last_name,
                email=email,
                password=password if password is not None else TEST_PASSWORD_HASH,
                faculty_id=faculty_id,
                role_id=role.role_id,
                created_at=datetime.now(timezone.utc)
            )
            session.add(user)
            session.commit()

            return Identity(
                user_id=user.user_id,
                role=role,
                faculty_id=faculty_id,
                email=email,
                first_name=first_name,
                last_name=last_name
            )
        finally:
            session.close()

    return _make_user


@pytest.fixture
def make_submission(db_manager):
    """Factory inserting a submission row directly, bypassing file storage"""

    def _make_submission(owner: Identity, title: str = "Essay", submitted_at: datetime = None,
                         status: str = STATUS_SUBMITTED, description: str = None,
                         academic_year: str = "2024-2025") -> int:
        session = db_manager.GetSession()
        try:
            submission = Submission(
                user_id=owner.user_id,
                faculty_id=owner.faculty_id,
                title=title,
                description=description,
                file_path=f"user_{owner.user_id}/file-{title}.pdf",
                file_type="pdf",
                academic_year=academic_year,
                submitted_at=submitted_at or datetime.now(timezone.utc),
                status=status,
                selected=status == "Selected",
                terms_accepted=True
            )
            session.add(submission)
            session.commit()
            return submission.submission_id
        finally:
            session.close()

    return _make_submission


@pytest.fixture
def auth_headers(config):
    """Build a bearer header for an Identity"""

    def _auth_headers(identity: Identity) -> dict:
        token = CreateAccessToken({"user_id": identity.user_id, "role": identity.role.value}, config)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
