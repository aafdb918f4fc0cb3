"""Typed exception hierarchy for directory service errors.

This module defines all custom exceptions used by the directory API client.
All exceptions inherit from DirectoryError base class for easy catching and
include descriptive messages with context to help with debugging.
"""


class SyncError(Exception):
    """Base exception for all roster-sync errors.

    Use this to catch any application-level error from the sync tool.
    """
    pass


class DirectoryError(SyncError):
    """Base exception for all directory service errors."""
    pass


class InvalidCredentialsError(DirectoryError):
    """Raised when the company ID or pre-shared key is missing or rejected."""

    def __init__(self, company_id: str, endpoint: str):
        super().__init__(
            f"Credentials are invalid (company: {company_id}, endpoint: {endpoint})"
        )
        self.company_id = company_id
        self.endpoint = endpoint


class APIUnreachableError(DirectoryError):
    """Raised when the directory API is not available or times out."""

    def __init__(self, endpoint: str):
        super().__init__(f"API is not available at {endpoint}")
        self.endpoint = endpoint


class APIAccessError(DirectoryError):
    """Raised when the directory API rejects a request or returns garbage."""

    def __init__(self, message: str = "Directory API request failed"):
        super().__init__(message)
