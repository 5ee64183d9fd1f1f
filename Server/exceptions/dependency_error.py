"""
Magazine Portal Server - Dependency Error Exception

Exception raised when the database or file storage fails.
"""

from exceptions.portal_error import PortalError


class DependencyError(PortalError):
    """Exception for database and storage failures."""
    status_code = 500
