"""Data models for the reconciler.

This module defines all data models used by the reconciliation engine.
All models use dataclasses for clean, type-safe data structures.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .errors import GroupResolutionError

logger = logging.getLogger(__name__)

# Identifier the directory service uses for its built-in Default group.
DEFAULT_GROUP_ID = -1


@dataclass(frozen=True)
class ExternalUserRecord:
    """A desired user as listed in the registry (source of truth).

    Attributes:
        email: Identity key, compared exactly (case-sensitive)
        group: Desired group name; empty means the Default group

    Example:
        >>> ExternalUserRecord(email="jane@example.com", group="Admins")
        >>> ExternalUserRecord(email="john@example.com")  # Default group
    """
    email: str
    group: str = ""


@dataclass
class RemoteUserRecord:
    """A user as currently known in the directory service.

    Instances live in the RemoteMirror and are mutated in place while the
    run progresses. The move phase only sets pending_group_name; the move
    apply step consumes it once the directory has accepted the move.

    Attributes:
        email: Identity key, compared exactly (case-sensitive)
        group_id: Identifier of the group the user belongs to
        group_name: Name of the group the user belongs to
        pending_group_name: Target group of a planned move (None if no move)
    """
    email: str
    group_id: Any
    group_name: str
    pending_group_name: Optional[str] = None


@dataclass
class RemoteGroup:
    """A group as listed by the directory service.

    Attributes:
        group_id: Opaque group identifier (DEFAULT_GROUP_ID for Default)
        name: Group name
        members: Users belonging to the group
    """
    group_id: Any
    name: str
    members: List[RemoteUserRecord] = field(default_factory=list)


@dataclass
class RemoteMirror:
    """In-process mutable copy of the directory's users and groups.

    The mirror is built once per run from a single group listing and is
    handed explicitly to each phase. Phases update it optimistically so
    later phases see the effect of earlier ones without re-querying.

    Attributes:
        groups: Group listing; the first entry is the Default group
        users: Flat user list, unique by email
    """
    groups: List[RemoteGroup]
    users: List[RemoteUserRecord] = field(default_factory=list)

    @classmethod
    def from_groups(cls, groups: List[RemoteGroup]) -> "RemoteMirror":
        """Flatten a group listing into a mirror.

        Args:
            groups: Group listing as returned by the directory API

        Returns:
            RemoteMirror holding the groups and their members

        Raises:
            GroupResolutionError: If the listing has no groups at all
        """
        if not groups:
            raise GroupResolutionError(
                "<Default>", "directory returned no groups (Default group expected first)"
            )

        mirror = cls(groups=list(groups))
        for group in groups:
            for member in group.members:
                if mirror.find_user(member.email) is not None:
                    logger.warning(
                        f"User {member.email} listed in more than one group, "
                        f"keeping first membership"
                    )
                    continue
                mirror.users.append(member)
        return mirror

    @property
    def default_group(self) -> RemoteGroup:
        """The Default group (first entry of the listing)."""
        return self.groups[0]

    def find_user(self, email: str) -> Optional[RemoteUserRecord]:
        """Return the mirror record for email, or None."""
        for user in self.users:
            if user.email == email:
                return user
        return None

    def add_user(self, email: str) -> RemoteUserRecord:
        """Append a newly invited user under the Default group.

        An email already present is left untouched and its record returned.
        """
        existing = self.find_user(email)
        if existing is not None:
            return existing

        record = RemoteUserRecord(
            email=email,
            group_id=DEFAULT_GROUP_ID,
            group_name=self.default_group.name,
        )
        self.users.append(record)
        return record

    def remove_user(self, email: str) -> bool:
        """Remove a user from the mirror. Returns True if it was present."""
        for index, user in enumerate(self.users):
            if user.email == email:
                del self.users[index]
                return True
        return False

    def replace_groups(self, groups: List[RemoteGroup]) -> None:
        """Swap in a freshly fetched group listing (users are kept)."""
        if not groups:
            raise GroupResolutionError(
                "<Default>", "directory returned no groups (Default group expected first)"
            )
        self.groups = list(groups)


@dataclass
class SyncReport:
    """Outcome of one sync run, used for the final summary.

    The planned_* lists hold what each phase computed (shown in dry runs);
    the other lists hold what was actually applied.

    Attributes:
        planned_adds: Registry records the Add phase computed
        planned_deletes: Emails the Delete phase computed
        planned_moves: (email, target group) pairs the Move phase computed
        invited: Emails invited
        deleted: Emails deleted
        moved: Emails moved
        created_groups: Groups created before moving
        skipped_phases: Names of phases that were skipped with work pending
    """
    planned_adds: List[ExternalUserRecord] = field(default_factory=list)
    planned_deletes: List[str] = field(default_factory=list)
    planned_moves: List[Tuple[str, str]] = field(default_factory=list)
    invited: List[str] = field(default_factory=list)
    deleted: List[str] = field(default_factory=list)
    moved: List[str] = field(default_factory=list)
    created_groups: List[str] = field(default_factory=list)
    skipped_phases: List[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """True if any phase computed work."""
        return bool(self.planned_adds or self.planned_deletes or self.planned_moves)
