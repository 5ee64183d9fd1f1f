"""
Magazine Portal Server - Authentication Utilities

This module provides authentication functionality including:
- Registration and credential checks (with one-time upgrade of legacy
  plain text passwords to bcrypt hashes)
- JWT token generation and validation
- Authentication and role dependencies for protected routes

Roles are normalized to UserRole here and nowhere else.
"""

import re
import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from config import ServerConfig
from database import GetDatabaseManager, GetConfig
from models.database import User, Faculty
from models.auth import (
    UserRole,
    NormalizeRole,
    TokenData,
    Identity,
    RegisterRequest,
    AuthUser,
    AuthResponse
)
from managers.database_manager import DatabaseManager
from activity_log import LogActivity, ACTION_LOGIN, ACTION_REGISTRATION, ACTION_PASSWORD_CHANGED
from exceptions import AuthError, ConflictError, DependencyError, ValidationError

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')
MIN_PASSWORD_LENGTH = 8

# Security scheme for FastAPI
# auto_error is off so a missing header is reported as 401 rather than 403
security = HTTPBearer(auto_error=False)


# ==================== JWT Token Functions ====================

def CreateAccessToken(data: dict, config: ServerConfig, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token

    Args:
        data: Dictionary containing user data (user_id, role)
        config: ServerConfig holding the signing secret and default lifetime
        expires_delta: Optional custom expiration time

    Returns:
        str: Encoded JWT token
    """
    to_encode = data.copy()

    if expires_delta is None:
        expires_delta = timedelta(hours=config.jwt_expiration_hours)
    expire = datetime.now(timezone.utc) + expires_delta

    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, config.jwt_secret, algorithm=config.jwt_algorithm)
    return encoded_jwt


def DecodeAccessToken(token: str, config: ServerConfig) -> TokenData:
    """
    Decode and validate a JWT access token

    Args:
        token: JWT token string
        config: ServerConfig holding the signing secret

    Returns:
        TokenData: User id and normalized role

    Raises:
        AuthError: 403 if the token is invalid, expired or carries an unknown role
    """
    try:
        payload = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except JWTError as e:
        logger.warning(f"Token verification failed: {str(e)}")
        raise AuthError("Invalid or expired token", status_code=403)

    user_id = payload.get("user_id")
    role = NormalizeRole(payload.get("role"))

    if user_id is None or role is None:
        raise AuthError("Invalid or expired token", status_code=403)

    return TokenData(user_id=user_id, role=role)


# ==================== Authentication Dependencies ====================

def GetCurrentIdentity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db_manager: DatabaseManager = Depends(GetDatabaseManager),
    config: ServerConfig = Depends(GetConfig)
) -> Identity:
    """
    FastAPI dependency to get the current authenticated user
    Validates the JWT token and reloads role and faculty from the user row

    Returns:
        Identity: The authenticated caller

    Raises:
        AuthError: 401 if no token is supplied or the user no longer exists,
                   403 if the token is invalid or expired
    """
    if credentials is None or not credentials.credentials:
        raise AuthError("Authentication required")

    token_data = DecodeAccessToken(credentials.credentials, config)

    session = db_manager.GetSession()
    try:
        user = session.query(User).filter(User.user_id == token_data.user_id).first()

        if user is None:
            raise AuthError("User not found")

        role = NormalizeRole(user.role_id)
        if role is None:
            logger.error(f"User {user.user_id} has unrecognised role_id {user.role_id}")
            raise AuthError("User role is not recognised", status_code=403)

        return Identity(
            user_id=user.user_id,
            role=role,
            faculty_id=user.faculty_id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name
        )

    except SQLAlchemyError as e:
        logger.error(f"Error loading user {token_data.user_id}: {str(e)}")
        raise DependencyError("Failed to verify user")
    finally:
        session.close()


def RequireRole(*roles: UserRole):
    """
    Dependency factory to create a role checking dependency

    Args:
        roles: Roles allowed to call the endpoint

    Returns:
        Dependency function that checks the caller's role

    Usage:
        @router.get("/something")
        async def some_endpoint(identity: Identity = Depends(RequireRole(UserRole.ADMIN))):
            ...
    """
    def role_checker(identity: Identity = Depends(GetCurrentIdentity)) -> Identity:
        """
        Check if current user has one of the required roles

        Raises:
            AuthError: 403 Forbidden if user lacks the role
        """
        if identity.role not in roles:
            allowed = " or ".join(role.value for role in roles)
            raise AuthError(f"{allowed} access required", status_code=403)

        return identity

    return role_checker


# Convenience dependencies for each role
RequireAdmin = RequireRole(UserRole.ADMIN)
RequireManager = RequireRole(UserRole.MANAGER)
RequireCoordinator = RequireRole(UserRole.COORDINATOR)
RequireStudent = RequireRole(UserRole.STUDENT)


# ==================== Session Helpers ====================

def BuildAuthResponse(user_data: dict, config: ServerConfig) -> AuthResponse:
    """
    Issue a token for an authenticated user

    Args:
        user_data: Dictionary returned by RegisterUser or AuthenticateUser
        config: ServerConfig

    Returns:
        AuthResponse: Token, user summary and lifetime in seconds
    """
    token = CreateAccessToken(
        {"user_id": user_data['user_id'], "role": user_data['role'].value},
        config
    )

    return AuthResponse(
        token=token,
        user=AuthUser(
            id=user_data['user_id'],
            first_name=user_data['first_name'],
            last_name=user_data['last_name'],
            email=user_data['email'],
            faculty=user_data['faculty_id'],
            role=user_data['role'],
            last_login=user_data.get('last_login')
        ),
        expires_in=config.jwt_expiration_hours * 3600
    )


def _UserToDict(user: User, role: UserRole, last_login: Optional[datetime] = None) -> dict:
    # Plain dictionary to avoid SQLAlchemy session issues
    return {
        'user_id': user.user_id,
        'first_name': user.first_name,
        'last_name': user.last_name,
        'email': user.email,
        'faculty_id': user.faculty_id,
        'role': role,
        'last_login': last_login
    }


# ==================== Authentication Helper Functions ====================

def RegisterUser(db_manager: DatabaseManager, request: RegisterRequest) -> dict:
    """
    Register a new student account

    Args:
        db_manager: DatabaseManager instance
        request: Registration details

    Returns:
        dict: User data for the new account

    Raises:
        ValidationError: If a field is missing or malformed
        ConflictError: If the email is already registered
    """
    first_name = (request.first_name or "").strip()
    last_name = (request.last_name or "").strip()
    email = (request.email or "").strip().lower()
    password = request.password or ""

    if not first_name or not last_name or not email or not request.faculty_id or not password:
        raise ValidationError("All fields are required")

    if not EMAIL_PATTERN.match(email):
        raise ValidationError("Invalid email format")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    session = db_manager.GetSession()
    try:
        faculty = session.query(Faculty).filter(Faculty.faculty_id == request.faculty_id).first()
        if not faculty:
            raise ValidationError(f"Invalid faculty_id: {request.faculty_id}")

        existing_user = session.query(User).filter(User.email == email).first()
        if existing_user:
            raise ConflictError("Email already in use")

        new_user = User(
            first_name=first_name,
            last_name=last_name,
            email=email,
            password=db_manager.HashPassword(password),
            faculty_id=request.faculty_id,
            role_id=UserRole.STUDENT.role_id,
            created_at=datetime.now(timezone.utc)
        )
        session.add(new_user)
        session.commit()

        user_data = _UserToDict(new_user, UserRole.STUDENT)

    except IntegrityError:
        # Another registration claimed the email between the check and the insert
        session.rollback()
        logger.warning(f"Duplicate registration for '{email}'")
        raise ConflictError("Email already in use")
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error registering user '{email}': {str(e)}")
        raise DependencyError("Registration failed")
    finally:
        session.close()

    logger.info(f"Registered new student '{email}' (user_id {user_data['user_id']})")
    LogActivity(db_manager, user_data['user_id'], ACTION_REGISTRATION, f"Registered account {email}")

    return user_data


def AuthenticateUser(db_manager: DatabaseManager, email: str, password: str) -> dict:
    """
    Authenticate a user with email and password

    Rows that still hold a plain text password are compared directly and,
    on success, upgraded to a bcrypt hash.

    Args:
        db_manager: DatabaseManager instance
        email: Email address (case-insensitive)
        password: Plain text password

    Returns:
        dict: User data; last_login holds the previous login time

    Raises:
        ValidationError: If email or password is missing
        AuthError: If the credentials are invalid
    """
    if not email or not password:
        raise ValidationError("Email and password are required")

    email = email.strip().lower()
    session = db_manager.GetSession()

    try:
        user = session.query(User).filter(User.email == email).first()

        if not user:
            raise AuthError("Invalid credentials")

        if db_manager.IsPasswordHash(user.password):
            if not db_manager.VerifyPassword(password, user.password):
                raise AuthError("Invalid credentials")
        else:
            if not secrets.compare_digest(password.encode('utf-8'), user.password.encode('utf-8')):
                raise AuthError("Invalid credentials")
            user.password = db_manager.HashPassword(password)
            logger.info(f"Upgraded legacy plain text password for user {user.user_id}")

        role = NormalizeRole(user.role_id)
        if role is None:
            logger.error(f"User {user.user_id} has unrecognised role_id {user.role_id}")
            raise AuthError("Invalid credentials")

        previous_login = user.last_login

        # Update last login timestamp
        user.last_login = datetime.now(timezone.utc)
        session.commit()

        user_data = _UserToDict(user, role, previous_login)

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Database error during login for '{email}': {str(e)}")
        raise DependencyError("Login failed due to database error")
    finally:
        session.close()

    logger.info(f"User '{email}' logged in successfully")
    LogActivity(db_manager, user_data['user_id'], ACTION_LOGIN, f"Logged in as {role.value}")

    return user_data


def ChangePassword(db_manager: DatabaseManager, identity: Identity, current_password: str, new_password: str) -> None:
    """
    Change the password for the authenticated user

    Args:
        db_manager: DatabaseManager instance
        identity: Authenticated caller
        current_password: Password to verify
        new_password: Replacement password

    Raises:
        AuthError: If the current password is incorrect
        ValidationError: If the new password is too short
    """
    if len(new_password or "") < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    session = db_manager.GetSession()
    try:
        user = session.query(User).filter(User.user_id == identity.user_id).first()
        if not user:
            raise AuthError("User not found")

        if db_manager.IsPasswordHash(user.password):
            matches = db_manager.VerifyPassword(current_password, user.password)
        else:
            matches = secrets.compare_digest(current_password.encode('utf-8'), user.password.encode('utf-8'))

        if not matches:
            logger.warning(f"Failed password change attempt for user '{user.email}' - incorrect current password")
            raise AuthError("Current password is incorrect")

        user.password = db_manager.HashPassword(new_password)
        session.commit()

    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Error changing password for user '{identity.email}': {str(e)}")
        raise DependencyError("An error occurred while changing password")
    finally:
        session.close()

    logger.info(f"User '{identity.email}' changed password successfully")
    LogActivity(db_manager, identity.user_id, ACTION_PASSWORD_CHANGED, "Changed account password")
