"""Data models for CLI operations.

This module defines the data models used by the CLI module.
All models use dataclasses for clean, type-safe data structures,
following the patterns established in roster_sync/reconciler/models.py.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional


class ExitCode(IntEnum):
    """Exit codes for CLI operations.

    These exit codes provide meaningful feedback about the operation result:
    - SUCCESS (0): Sync completed (including dry runs and skipped phases)
    - GENERAL_ERROR (1): General error (config, registry, internal errors)
    - ABORTED (2): User aborted at a confirmation prompt
    - AUTH_ERROR (3): Company ID or pre-shared key rejected
    - NETWORK_ERROR (4): Directory API unreachable or failing
    - PARTIAL_APPLY (5): Directory refused to process some users

    Example:
        >>> exit_code = ExitCode.SUCCESS
        >>> sys.exit(exit_code)
    """
    SUCCESS = 0
    GENERAL_ERROR = 1
    ABORTED = 2
    AUTH_ERROR = 3
    NETWORK_ERROR = 4
    PARTIAL_APPLY = 5


@dataclass
class SyncSettings:
    """Tunable settings loaded from .roster-sync.yaml and the environment.

    Attributes:
        api_url: Directory API base URL (None: use ROSTER_SYNC_API_URL or default)
        timeout: Per-request timeout in seconds
        invite_batch_size: Emails per invite call
        delete_batch_size: Emails per delete call
        move_batch_size: Emails per move call

    Example:
        >>> settings = SyncSettings(delete_batch_size=25)
    """
    api_url: Optional[str] = None
    timeout: float = 30
    invite_batch_size: int = 100
    delete_batch_size: int = 50
    move_batch_size: int = 100
