"""
Magazine Portal Server - Authentication Endpoints

This module contains authentication-related endpoints including registration,
login, the current user profile and password management.
"""

import logging
from fastapi import APIRouter, Depends, status

from config import ServerConfig
from database import GetDatabaseManager, GetConfig
from managers.database_manager import DatabaseManager
from models.auth import (
    Identity,
    LoginRequest,
    RegisterRequest,
    AuthResponse,
    ChangePasswordRequest,
    ChangePasswordResponse
)
from models.api import UserSummary
from auth import RegisterUser, AuthenticateUser, BuildAuthResponse, ChangePassword, GetCurrentIdentity
from reporting import GetUserProfile


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


# ==================== Authentication Endpoints ====================

@router.post("/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED,
             tags=["Authentication"])
async def register(
    register_request: RegisterRequest,
    db_manager: DatabaseManager = Depends(GetDatabaseManager),
    config: ServerConfig = Depends(GetConfig)
):
    """
    Register a new student account and return a session token

    Args:
        register_request: Name, email, faculty and password

    Returns:
        AuthResponse: JWT token, user summary and expiration time
    """
    user_data = RegisterUser(db_manager, register_request)
    return BuildAuthResponse(user_data, config)


@router.post("/auth/login", response_model=AuthResponse, tags=["Authentication"])
async def login(
    login_request: LoginRequest,
    db_manager: DatabaseManager = Depends(GetDatabaseManager),
    config: ServerConfig = Depends(GetConfig)
):
    """
    Authenticate user and return JWT token

    Args:
        login_request: Email and password

    Returns:
        AuthResponse: JWT token, user summary and expiration time

    Raises:
        AuthError: If credentials are invalid
    """
    user_data = AuthenticateUser(db_manager, login_request.email, login_request.password)
    return BuildAuthResponse(user_data, config)


@router.get("/users/me", response_model=UserSummary, tags=["User"])
async def get_current_user(
    identity: Identity = Depends(GetCurrentIdentity),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Get the profile of the authenticated user
    """
    return GetUserProfile(db_manager, identity.user_id)


@router.post("/users/me/password", response_model=ChangePasswordResponse, tags=["User"])
async def change_password(
    password_request: ChangePasswordRequest,
    identity: Identity = Depends(GetCurrentIdentity),
    db_manager: DatabaseManager = Depends(GetDatabaseManager)
):
    """
    Change the password for the currently authenticated user

    Args:
        password_request: Current and new passwords
        identity: Currently authenticated user (from JWT token)

    Returns:
        ChangePasswordResponse: Success status and message

    Raises:
        AuthError: If current password is incorrect
    """
    ChangePassword(db_manager, identity, password_request.current_password, password_request.new_password)

    return ChangePasswordResponse(
        success=True,
        message="Password changed successfully"
    )
