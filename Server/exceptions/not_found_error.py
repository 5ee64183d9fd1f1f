"""
Magazine Portal Server - Not Found Error Exception

Exception raised when a resource is absent or outside the caller's scope.
"""

from exceptions.portal_error import PortalError


class NotFoundError(PortalError):
    """Exception for missing or out-of-scope resources."""
    status_code = 404
