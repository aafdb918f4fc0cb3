"""Sync orchestration: Add, Delete, then Move.

This module sequences the reconciliation of one run. The directory is
queried once; a RemoteMirror built from that listing is handed to each
phase in turn and updated as the phase applies, so that:

- users invited by the Add phase are not deleted by the Delete phase and
  can be moved to their group by the Move phase
- users removed by the Delete phase are not considered for moves

Every phase is gated by a ConfirmationGate and can be skipped on its own.
An abort at any gate ends the run without rolling back earlier phases.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .batcher import chunk
from .confirmation import (
    AddRenderer,
    ConfirmationGate,
    DeleteRenderer,
    GateDecision,
    MoveRenderer,
)
from .differencer import compute_adds, compute_deletes, compute_moves
from .errors import PartialApplyError
from .group_provisioner import GroupProvisioner, find_missing_groups
from .group_resolver import resolve_group_id
from .models import (
    DEFAULT_GROUP_ID,
    ExternalUserRecord,
    RemoteMirror,
    RemoteUserRecord,
    SyncReport,
)

logger = logging.getLogger(__name__)

INVITE_BATCH_SIZE = 100
DELETE_BATCH_SIZE = 50
MOVE_BATCH_SIZE = 100

ADD_PROMPT = "Users to invite"
DELETE_PROMPT = "Users to delete"
MOVE_PROMPT = "Users to move to another group"


class SyncOrchestrator:
    """Runs the three reconciliation phases against the directory.

    The workflow:
        1. Fetch the group listing once and build the mirror
        2. Add phase: invite registry users missing from the directory
        3. Delete phase: delete directory users missing from the registry
        4. Move phase: create missing target groups, then move users

    Example:
        >>> gate = ConfirmationGate(RunMode.AUTO_CONFIRM, output)
        >>> orchestrator = SyncOrchestrator(api, gate)
        >>> report = orchestrator.run(registry_records)
    """

    def __init__(
        self,
        api: Any,
        gate: ConfirmationGate,
        provisioner: Optional[GroupProvisioner] = None,
        invite_batch_size: int = INVITE_BATCH_SIZE,
        delete_batch_size: int = DELETE_BATCH_SIZE,
        move_batch_size: int = MOVE_BATCH_SIZE,
    ):
        """Initialize the orchestrator.

        Args:
            api: DirectoryAPI (or compatible) used for every remote call
            gate: Confirmation gate shared by all phases
            provisioner: GroupProvisioner (defaults to one over api)
            invite_batch_size: Emails per invite call
            delete_batch_size: Emails per delete call
            move_batch_size: Emails per move call
        """
        self.api = api
        self.gate = gate
        self.provisioner = provisioner or GroupProvisioner(api)
        self.invite_batch_size = invite_batch_size
        self.delete_batch_size = delete_batch_size
        self.move_batch_size = move_batch_size

    def run(self, external: Sequence[ExternalUserRecord]) -> SyncReport:
        """Reconcile the directory with the registry.

        Args:
            external: Registry records (source of truth)

        Returns:
            SyncReport describing planned and applied changes

        Raises:
            SyncAbortedError: If the user aborts at a confirmation
            PartialApplyError: If the directory refuses to invite some users
            GroupResolutionError: If a move target cannot be resolved
            DirectoryError: On any transport or API failure
        """
        logger.info(f"Starting sync of {len(external)} registry record(s)")

        mirror = RemoteMirror.from_groups(self.api.fetch_groups())
        logger.info(
            f"Directory has {len(mirror.users)} user(s) in {len(mirror.groups)} group(s)"
        )

        report = SyncReport()
        self.run_add_phase(external, mirror, report)
        self.run_delete_phase(external, mirror, report)
        self.run_move_phase(external, mirror, report)

        logger.info(
            f"Sync finished: {len(report.invited)} invited, "
            f"{len(report.deleted)} deleted, {len(report.moved)} moved"
        )
        return report

    def run_add_phase(
        self,
        external: Sequence[ExternalUserRecord],
        mirror: RemoteMirror,
        report: SyncReport,
    ) -> List[str]:
        """Invite registry users missing from the directory.

        New users join the Default group; the Move phase places them in
        their registry group afterwards.

        Returns:
            Emails invited (empty if skipped)
        """
        to_add = compute_adds(external, mirror.users)
        report.planned_adds.extend(to_add)

        decision = self.gate.confirm(
            ADD_PROMPT, to_add, AddRenderer(mirror.default_group.name), phase="add"
        )
        if decision is GateDecision.SKIP:
            if to_add:
                report.skipped_phases.append("add")
            return []

        invited = []
        for batch in chunk([record.email for record in to_add], self.invite_batch_size):
            logger.info(f"Inviting {len(batch)} user(s)")
            not_invited = self.api.invite_users(batch, DEFAULT_GROUP_ID)
            if not_invited:
                raise PartialApplyError("invite", not_invited)

            for email in batch:
                mirror.add_user(email)
            invited.extend(batch)

        report.invited.extend(invited)
        return invited

    def run_delete_phase(
        self,
        external: Sequence[ExternalUserRecord],
        mirror: RemoteMirror,
        report: SyncReport,
    ) -> List[str]:
        """Delete directory users missing from the registry.

        Returns:
            Emails deleted (empty if skipped)
        """
        to_delete = compute_deletes(external, mirror.users)
        report.planned_deletes.extend(user.email for user in to_delete)

        decision = self.gate.confirm(
            DELETE_PROMPT, to_delete, DeleteRenderer(), phase="delete"
        )
        if decision is GateDecision.SKIP:
            if to_delete:
                report.skipped_phases.append("delete")
            return []

        deleted = []
        for batch in chunk([user.email for user in to_delete], self.delete_batch_size):
            logger.info(f"Deleting {len(batch)} user(s)")
            self.api.delete_users(batch)
            for email in batch:
                mirror.remove_user(email)
            deleted.extend(batch)

        report.deleted.extend(deleted)
        return deleted

    def run_move_phase(
        self,
        external: Sequence[ExternalUserRecord],
        mirror: RemoteMirror,
        report: SyncReport,
    ) -> List[str]:
        """Move users whose directory group differs from the registry.

        Target groups missing from the directory are created first.

        Returns:
            Emails moved (empty if skipped)
        """
        to_move = compute_moves(external, mirror.users, mirror.default_group.name)
        report.planned_moves.extend(
            (user.email, user.pending_group_name) for user in to_move
        )

        decision = self.gate.confirm(MOVE_PROMPT, to_move, MoveRenderer(), phase="move")
        if decision is GateDecision.SKIP:
            if to_move:
                report.skipped_phases.append("move")
            return []

        missing = find_missing_groups(to_move, mirror.groups)
        if missing:
            logger.info(f"Move targets missing from directory: {', '.join(missing)}")
            mirror.replace_groups(self.provisioner.provision(missing))
            report.created_groups.extend(missing)

        by_target: Dict[str, List[RemoteUserRecord]] = {}
        for user in to_move:
            by_target.setdefault(user.pending_group_name, []).append(user)

        moved = []
        for target, users in by_target.items():
            group_id = resolve_group_id(mirror.groups, target)
            for batch in chunk(users, self.move_batch_size):
                logger.info(f"Moving {len(batch)} user(s) to '{target}' ({group_id})")
                self.api.move_users([user.email for user in batch], group_id)
                for user in batch:
                    user.group_id = group_id
                    user.group_name = target
                    user.pending_group_name = None
                moved.extend(user.email for user in batch)

        report.moved.extend(moved)
        return moved
