"""
Magazine Portal Server - Portal Error Exception

Base exception class for all errors surfaced to API clients.
"""


class PortalError(Exception):
    """Base exception for portal errors."""

    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
