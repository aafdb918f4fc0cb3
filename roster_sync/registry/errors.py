"""Typed exception hierarchy for registry reading errors."""

from typing import Optional

from roster_sync.directory_client.errors import SyncError


class RegistryError(SyncError):
    """Raised when the user registry cannot be read or is malformed."""

    def __init__(self, source: str, message: str, row: Optional[int] = None):
        if row is not None:
            full_message = f"Registry error in {source} (entry {row}): {message}"
        else:
            full_message = f"Registry error in {source}: {message}"
        super().__init__(full_message)
        self.source = source
        self.row = row
        self.original_message = message
