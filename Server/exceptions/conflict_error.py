"""
Magazine Portal Server - Conflict Error Exception

Exception raised when a request conflicts with existing state.
"""

from exceptions.portal_error import PortalError


class ConflictError(PortalError):
    """Exception for conflicting requests (duplicate email, terminal status)."""
    status_code = 409
