"""
Magazine Portal Server - Authentication Error Exception

Exception raised for missing, invalid or expired credentials and for
role checks. Defaults to 401; invalid tokens and missing roles use 403.
"""

from exceptions.portal_error import PortalError


class AuthError(PortalError):
    """Exception for authentication errors."""
    status_code = 401
