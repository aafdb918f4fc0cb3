"""Command-line interface for directory membership sync.

This package provides the `roster-sync` CLI tool that reads the user
registry, reconciles it against the directory service through the
reconciler, and reports the outcome with progress indication and error
handling.
"""

from .sync_command import SyncCommand, select_run_mode
from .models import ExitCode, SyncSettings
from .errors import CLIError, ConfigError

__all__ = [
    'SyncCommand',
    'select_run_mode',
    'ExitCode',
    'SyncSettings',
    'CLIError',
    'ConfigError',
]
