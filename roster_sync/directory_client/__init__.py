"""Directory service client library.

This package provides a thin, typed client over the directory service's
REST API: group listing, invitations, deletions, group creation and moves.
"""

from .errors import (
    SyncError,
    DirectoryError,
    InvalidCredentialsError,
    APIUnreachableError,
    APIAccessError,
)

__all__ = [
    "SyncError",
    "DirectoryError",
    "InvalidCredentialsError",
    "APIUnreachableError",
    "APIAccessError",
]
