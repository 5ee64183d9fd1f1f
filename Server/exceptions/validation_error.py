"""
Magazine Portal Server - Validation Error Exception

Exception raised for missing or malformed input.
"""

from exceptions.portal_error import PortalError


class ValidationError(PortalError):
    """Exception for invalid input."""
    status_code = 400
