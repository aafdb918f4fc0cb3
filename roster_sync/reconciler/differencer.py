"""Registry versus directory comparison.

This module computes the three action sets of a sync run by comparing the
registry (source of truth) with the current RemoteMirror users. Email is the
only identity key and is compared exactly:

- compute_adds(): registry users missing from the directory (to invite)
- compute_deletes(): directory users missing from the registry (to delete)
- compute_moves(): users present on both sides whose group differs

Deletes and moves are always evaluated against the mirror as left by the
previous phase, so users invited during the Add phase are neither deleted
nor ignored by the Move phase.
"""

import logging
from typing import List, Sequence, Set

from .models import ExternalUserRecord, RemoteUserRecord

logger = logging.getLogger(__name__)


def effective_group_name(record: ExternalUserRecord, default_group_name: str) -> str:
    """Return the group a registry record targets, substituting Default for empty."""
    return record.group or default_group_name


def compute_adds(
    external: Sequence[ExternalUserRecord],
    remote_users: Sequence[RemoteUserRecord],
) -> List[ExternalUserRecord]:
    """Find registry users that do not exist in the directory.

    Args:
        external: Registry records
        remote_users: Current mirror users

    Returns:
        Records to invite, in registry order, one per email
    """
    remote_emails = {user.email for user in remote_users}
    queued: Set[str] = set()
    to_add = []

    for record in external:
        if record.email in remote_emails or record.email in queued:
            continue
        queued.add(record.email)
        to_add.append(record)

    logger.debug(f"Computed {len(to_add)} user(s) to add")
    return to_add


def compute_deletes(
    external: Sequence[ExternalUserRecord],
    remote_users: Sequence[RemoteUserRecord],
) -> List[RemoteUserRecord]:
    """Find directory users that are absent from the registry.

    Args:
        external: Registry records
        remote_users: Current mirror users (after the Add phase)

    Returns:
        Mirror records to delete, in mirror order
    """
    external_emails = {record.email for record in external}
    to_delete = [user for user in remote_users if user.email not in external_emails]

    logger.debug(f"Computed {len(to_delete)} user(s) to delete")
    return to_delete


def compute_moves(
    external: Sequence[ExternalUserRecord],
    remote_users: Sequence[RemoteUserRecord],
    default_group_name: str,
) -> List[RemoteUserRecord]:
    """Find users whose directory group differs from their registry group.

    Each matching mirror record gets pending_group_name set to its target.
    Registry users not present in the mirror (for example because the Add
    phase was skipped) are ignored. A user appears at most once; for a
    repeated registry email the first record wins.

    Args:
        external: Registry records
        remote_users: Current mirror users (after the Delete phase)
        default_group_name: Name of the directory's Default group

    Returns:
        Mirror records to move, in registry order
    """
    to_move = []
    seen: Set[str] = set()

    for record in external:
        if record.email in seen:
            continue
        seen.add(record.email)

        target = effective_group_name(record, default_group_name)
        for user in remote_users:
            if user.email != record.email:
                continue
            if user.group_name != target:
                user.pending_group_name = target
                to_move.append(user)
            break

    logger.debug(f"Computed {len(to_move)} user(s) to move")
    return to_move
