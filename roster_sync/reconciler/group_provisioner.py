"""Creation of move-target groups missing from the directory."""

import logging
from typing import Any, List, Sequence

from .models import RemoteGroup, RemoteUserRecord

logger = logging.getLogger(__name__)


def find_missing_groups(
    to_move: Sequence[RemoteUserRecord],
    groups: Sequence[RemoteGroup],
) -> List[str]:
    """List the move targets that do not exist in the directory yet.

    Args:
        to_move: Mirror records with pending_group_name set
        groups: Current group listing

    Returns:
        Distinct missing group names, in discovery order
    """
    existing = {group.name for group in groups}
    missing: List[str] = []

    for user in to_move:
        name = user.pending_group_name
        if name and name not in existing and name not in missing:
            missing.append(name)

    return missing


class GroupProvisioner:
    """Creates missing groups and re-fetches the group listing.

    The directory does not return the identifier of a created group, so
    after all creations the full listing is fetched again. A failing
    creation propagates and ends the run; groups created before it stay.

    Example:
        >>> provisioner = GroupProvisioner(api)
        >>> groups = provisioner.provision(["Engineers"])
    """

    def __init__(self, api: Any):
        """Initialize the provisioner.

        Args:
            api: DirectoryAPI (or compatible) used for create_group/fetch_groups
        """
        self.api = api

    def provision(self, missing_names: Sequence[str]) -> List[RemoteGroup]:
        """Create each missing group, then return the refreshed listing.

        Args:
            missing_names: Group names to create, in creation order

        Returns:
            Fresh group listing including the new groups
        """
        created = []
        for name in missing_names:
            if name in created:
                continue
            logger.info(f"Creating group '{name}'")
            self.api.create_group(name)
            created.append(name)

        logger.info(f"Created {len(created)} group(s), refreshing group listing")
        return self.api.fetch_groups()
