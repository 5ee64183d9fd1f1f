"""
Magazine Portal Server - Auth Models Package

This package contains Pydantic models for authentication endpoints.
"""

from models.auth.user_role import UserRole, NormalizeRole, ROLE_IDS
from models.auth.token_data import TokenData
from models.auth.identity import Identity
from models.auth.login_request import LoginRequest
from models.auth.register_request import RegisterRequest
from models.auth.auth_response import AuthUser, AuthResponse
from models.auth.change_password_request import ChangePasswordRequest
from models.auth.change_password_response import ChangePasswordResponse

__all__ = [
    'UserRole',
    'NormalizeRole',
    'ROLE_IDS',
    'TokenData',
    'Identity',
    'LoginRequest',
    'RegisterRequest',
    'AuthUser',
    'AuthResponse',
    'ChangePasswordRequest',
    'ChangePasswordResponse',
]
