"""Reconciliation engine for directory membership sync.

This package compares the registry with the directory's users and groups,
and applies the resulting invites, deletions and group moves in batches
behind per-phase confirmations.
"""

from .batcher import chunk
from .confirmation import (
    AddRenderer,
    ConfirmationGate,
    DeleteRenderer,
    GateDecision,
    ItemRenderer,
    MoveRenderer,
    RunMode,
)
from .differencer import compute_adds, compute_deletes, compute_moves
from .errors import (
    GroupResolutionError,
    PartialApplyError,
    ReconcilerError,
    SyncAbortedError,
)
from .group_provisioner import GroupProvisioner, find_missing_groups
from .group_resolver import resolve_group_id
from .models import (
    DEFAULT_GROUP_ID,
    ExternalUserRecord,
    RemoteGroup,
    RemoteMirror,
    RemoteUserRecord,
    SyncReport,
)
from .orchestrator import SyncOrchestrator

__all__ = [
    'chunk',
    'AddRenderer',
    'ConfirmationGate',
    'DeleteRenderer',
    'GateDecision',
    'ItemRenderer',
    'MoveRenderer',
    'RunMode',
    'compute_adds',
    'compute_deletes',
    'compute_moves',
    'GroupResolutionError',
    'PartialApplyError',
    'ReconcilerError',
    'SyncAbortedError',
    'GroupProvisioner',
    'find_missing_groups',
    'resolve_group_id',
    'DEFAULT_GROUP_ID',
    'ExternalUserRecord',
    'RemoteGroup',
    'RemoteMirror',
    'RemoteUserRecord',
    'SyncReport',
    'SyncOrchestrator',
]
