"""
Magazine Portal Server - Exceptions Package

Contains all exception classes raised by the portal service layer.
Each exception carries the HTTP status code it is rendered with.
"""

from exceptions.portal_error import PortalError
from exceptions.validation_error import ValidationError
from exceptions.auth_error import AuthError
from exceptions.not_found_error import NotFoundError
from exceptions.conflict_error import ConflictError
from exceptions.dependency_error import DependencyError

__all__ = [
    'PortalError',
    'ValidationError',
    'AuthError',
    'NotFoundError',
    'ConflictError',
    'DependencyError',
]
