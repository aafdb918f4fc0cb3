"""Group name to directory identifier resolution."""

from typing import Any, Optional, Sequence

from .errors import GroupResolutionError
from .models import DEFAULT_GROUP_ID, RemoteGroup


def resolve_group_id(groups: Sequence[RemoteGroup], name: Optional[str]) -> Any:
    """Resolve a group name to its directory identifier.

    An empty or missing name stands for the Default group and resolves to
    DEFAULT_GROUP_ID without searching. Otherwise the first group whose name
    matches exactly wins.

    Args:
        groups: Current group listing
        name: Group name to resolve

    Returns:
        The group identifier

    Raises:
        GroupResolutionError: If no group carries that name
    """
    if not name:
        return DEFAULT_GROUP_ID

    for group in groups:
        if group.name == name:
            return group.group_id

    raise GroupResolutionError(name, "not present in the directory group listing")
