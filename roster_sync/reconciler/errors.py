"""Typed exception hierarchy for reconciliation errors.

This module defines all custom exceptions raised while computing and
applying a sync plan. All exceptions inherit from ReconcilerError.
"""

from typing import List, Optional

from roster_sync.directory_client.errors import SyncError


class ReconcilerError(SyncError):
    """Base exception for all reconciliation errors."""
    pass


class SyncAbortedError(ReconcilerError):
    """Raised when the user answers Abort at a confirmation prompt.

    Phases applied before the abort are not rolled back.
    """

    def __init__(self, phase: Optional[str] = None, reason: Optional[str] = None):
        if phase:
            message = f"Sync aborted by user during {phase} phase"
        else:
            message = "Sync aborted by user"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.phase = phase
        self.reason = reason


class PartialApplyError(ReconcilerError):
    """Raised when the directory reports emails it did not process."""

    def __init__(self, operation: str, emails: List[str]):
        super().__init__(
            f"{operation} was not applied for {len(emails)} user(s): {', '.join(emails)}"
        )
        self.operation = operation
        self.emails = list(emails)


class GroupResolutionError(ReconcilerError):
    """Raised when a group name has no identifier in the directory listing.

    Every move target must resolve once missing groups have been created,
    so this signals an internal-consistency bug.
    """

    def __init__(self, group_name: str, reason: Optional[str] = None):
        message = f"Group '{group_name}' could not be resolved"
        if reason:
            message += f": {reason}"
        super().__init__(message)
        self.group_name = group_name
        self.reason = reason
