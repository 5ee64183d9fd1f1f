"""
Magazine Portal Server - User Role Enum

Closed set of portal roles and the normalization boundary for the
numeric ids and legacy string codes found in stored rows and tokens.
"""

from enum import Enum
from typing import Optional


class UserRole(str, Enum):
    """Portal roles"""
    ADMIN = "Admin"
    MANAGER = "Manager"
    COORDINATOR = "Coordinator"
    STUDENT = "Student"

    @property
    def role_id(self) -> int:
        return ROLE_IDS[self]


ROLE_IDS = {
    UserRole.ADMIN: 1,
    UserRole.MANAGER: 2,
    UserRole.COORDINATOR: 3,
    UserRole.STUDENT: 4,
}

# Every accepted spelling, compared upper-cased
_ROLE_ALIASES = {
    "1": UserRole.ADMIN,
    "ADMIN": UserRole.ADMIN,
    "2": UserRole.MANAGER,
    "MNGR": UserRole.MANAGER,
    "MANAGER": UserRole.MANAGER,
    "MARKETING MANAGER": UserRole.MANAGER,
    "3": UserRole.COORDINATOR,
    "COORD": UserRole.COORDINATOR,
    "COORDINATOR": UserRole.COORDINATOR,
    "MARKETING COORDINATOR": UserRole.COORDINATOR,
    "4": UserRole.STUDENT,
    "STUDT": UserRole.STUDENT,
    "STUDENT": UserRole.STUDENT,
}


def NormalizeRole(value) -> Optional[UserRole]:
    """
    Map any stored or encoded role representation to a UserRole

    Args:
        value: Role id (int or digit string), legacy code, role name or UserRole

    Returns:
        UserRole: Canonical role, or None if the value is not recognised
    """
    if isinstance(value, UserRole):
        return value
    if value is None or isinstance(value, bool):
        return None
    return _ROLE_ALIASES.get(str(value).strip().upper())
