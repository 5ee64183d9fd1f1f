"""
Tests for registration, login and token handling in Magazine Portal Server
"""

from datetime import timedelta

import pytest

from models.auth import UserRole, NormalizeRole, RegisterRequest
from models.database import User
from auth import RegisterUser, AuthenticateUser, CreateAccessToken, DecodeAccessToken
from exceptions import AuthError, ConflictError, ValidationError

TEST_PASSWORD = "correct-horse-battery"


def _register_request(**overrides):
    values = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "email": "ada@university.edu",
        "faculty_id": 1,
        "password": "analytical",
    }
    values.update(overrides)
    return RegisterRequest(**values)


def test_register_creates_student_with_hashed_password(db_manager):
    """Registration stores a bcrypt hash and assigns the Student role"""
    user_data = RegisterUser(db_manager, _register_request(email="  Ada@University.edu "))

    assert user_data["role"] == UserRole.STUDENT
    assert user_data["email"] == "ada@university.edu"

    session = db_manager.GetSession()
    try:
        user = session.query(User).filter(User.user_id == user_data["user_id"]).first()
        assert user.password != "analytical"
        assert db_manager.IsPasswordHash(user.password)
    finally:
        session.close()


def test_register_duplicate_email_is_case_insensitive(db_manager):
    RegisterUser(db_manager, _register_request())

    with pytest.raises(ConflictError):
        RegisterUser(db_manager, _register_request(email="ADA@university.EDU"))


def test_register_concurrent_duplicate_is_conflict(db_manager, make_user, monkeypatch):
    """A competing insert after the duplicate check still reports a conflict"""
    hash_password = db_manager.HashPassword

    def competing_hash(password):
        make_user(email="ada@university.edu")
        return hash_password(password)

    monkeypatch.setattr(db_manager, "HashPassword", competing_hash)

    with pytest.raises(ConflictError) as exc_info:
        RegisterUser(db_manager, _register_request())

    assert exc_info.value.message == "Email already in use"
    session = db_manager.GetSession()
    try:
        assert session.query(User).filter(User.email == "ada@university.edu").count() == 1
    finally:
        session.close()


@pytest.mark.parametrize("overrides, message", [
    ({"first_name": ""}, "All fields are required"),
    ({"faculty_id": None}, "All fields are required"),
    ({"email": "not-an-email"}, "Invalid email format"),
    ({"email": "a b@uni.edu"}, "Invalid email format"),
    ({"password": "short"}, "Password must be at least 8 characters"),
])
def test_register_rejects_invalid_input(db_manager, overrides, message):
    with pytest.raises(ValidationError) as exc_info:
        RegisterUser(db_manager, _register_request(**overrides))

    assert exc_info.value.message == message
    assert exc_info.value.status_code == 400


def test_register_rejects_unknown_faculty(db_manager):
    with pytest.raises(ValidationError):
        RegisterUser(db_manager, _register_request(faculty_id=999))


def test_login_with_wrong_password_fails(db_manager, make_user):
    identity = make_user(email="student@university.edu")

    with pytest.raises(AuthError) as exc_info:
        AuthenticateUser(db_manager, identity.email, "wrong-password")

    assert exc_info.value.status_code == 401
    assert exc_info.value.message == "Invalid credentials"


def test_login_unknown_email_fails(db_manager):
    with pytest.raises(AuthError):
        AuthenticateUser(db_manager, "nobody@university.edu", TEST_PASSWORD)


def test_login_updates_last_login_and_returns_previous(db_manager, make_user):
    identity = make_user()

    first = AuthenticateUser(db_manager, identity.email, TEST_PASSWORD)
    second = AuthenticateUser(db_manager, identity.email.upper(), TEST_PASSWORD)

    assert first["last_login"] is None
    assert second["last_login"] is not None


def test_legacy_plaintext_password_is_upgraded_on_login(db_manager, make_user):
    """A row holding a plain text password logs in once and is rewritten as a hash"""
    identity = make_user(password="legacy-secret")

    user_data = AuthenticateUser(db_manager, identity.email, "legacy-secret")
    assert user_data["user_id"] == identity.user_id

    session = db_manager.GetSession()
    try:
        stored = session.query(User).filter(User.user_id == identity.user_id).first().password
    finally:
        session.close()

    assert stored != "legacy-secret"
    assert db_manager.IsPasswordHash(stored)
    assert db_manager.VerifyPassword("legacy-secret", stored)

    # Subsequent logins go through the hash
    AuthenticateUser(db_manager, identity.email, "legacy-secret")


def test_legacy_plaintext_mismatch_is_not_upgraded(db_manager, make_user):
    identity = make_user(password="legacy-secret")

    with pytest.raises(AuthError):
        AuthenticateUser(db_manager, identity.email, "guess")

    session = db_manager.GetSession()
    try:
        stored = session.query(User).filter(User.user_id == identity.user_id).first().password
    finally:
        session.close()

    assert stored == "legacy-secret"


@pytest.mark.parametrize("value, expected", [
    (1, UserRole.ADMIN),
    ("2", UserRole.MANAGER),
    ("MNGR", UserRole.MANAGER),
    ("Marketing Coordinator", UserRole.COORDINATOR),
    ("coord", UserRole.COORDINATOR),
    ("STUDT", UserRole.STUDENT),
    (4, UserRole.STUDENT),
    (UserRole.ADMIN, UserRole.ADMIN),
    ("Admin", UserRole.ADMIN),
])
def test_normalize_role(value, expected):
    assert NormalizeRole(value) == expected


@pytest.mark.parametrize("value", [None, 0, 7, "guest", True, ""])
def test_normalize_role_rejects_unknown_values(value):
    assert NormalizeRole(value) is None


def test_token_round_trip_normalizes_legacy_role(config):
    token = CreateAccessToken({"user_id": 5, "role": "COORD"}, config)
    token_data = DecodeAccessToken(token, config)

    assert token_data.user_id == 5
    assert token_data.role == UserRole.COORDINATOR


def test_expired_token_is_rejected_with_403(config):
    token = CreateAccessToken({"user_id": 5, "role": "Student"}, config, expires_delta=timedelta(seconds=-1))

    with pytest.raises(AuthError) as exc_info:
        DecodeAccessToken(token, config)

    assert exc_info.value.status_code == 403


def test_token_signed_with_other_secret_is_rejected(config):
    from config import ServerConfig

    other = ServerConfig(jwt_secret="someone-else")
    token = CreateAccessToken({"user_id": 5, "role": "Student"}, other)

    with pytest.raises(AuthError):
        DecodeAccessToken(token, config)
