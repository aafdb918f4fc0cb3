"""Test fixtures for the directory service and reconciler.

Provides:
- FakeDirectoryAPI: an in-memory directory service with the DirectoryAPI surface
- ScriptedPrompter: a prompter that replays canned answers
- Helpers to build group listings and registry records

These fixtures are used by unit and integration tests.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from roster_sync.reconciler.models import (
    DEFAULT_GROUP_ID,
    ExternalUserRecord,
    RemoteGroup,
    RemoteUserRecord,
)


def make_group(group_id: Any, name: str, emails: Iterable[str] = ()) -> RemoteGroup:
    """Build a RemoteGroup whose members point back at the group."""
    return RemoteGroup(
        group_id=group_id,
        name=name,
        members=[RemoteUserRecord(email=e, group_id=group_id, group_name=name) for e in emails],
    )


def make_registry(*pairs: Tuple[str, str]) -> List[ExternalUserRecord]:
    """Build registry records from (email, group) pairs."""
    return [ExternalUserRecord(email=email, group=group) for email, group in pairs]


class FakeDirectoryAPI:
    """In-memory directory service.

    Keeps a name -> (id, members) table; the first group is Default with
    DEFAULT_GROUP_ID. Every call is recorded in ``calls`` as a tuple.

    Example:
        >>> api = FakeDirectoryAPI({"Admins": ["bob@example.com"]}, default_members=["john@example.com"])
        >>> api.fetch_groups()[0].name
        'Default'
    """

    def __init__(
        self,
        groups: Optional[Dict[str, Sequence[str]]] = None,
        default_members: Sequence[str] = (),
        default_name: str = "Default",
        group_ids: Optional[Dict[str, Any]] = None,
        refuse_invites: Sequence[str] = (),
        fail_create: Sequence[str] = (),
    ):
        self.default_name = default_name
        self._groups: Dict[str, Dict[str, Any]] = {
            default_name: {"id": DEFAULT_GROUP_ID, "members": list(default_members)}
        }
        self._next_id = 100
        for name, members in (groups or {}).items():
            group_id = (group_ids or {}).get(name)
            if group_id is None:
                group_id = self._allocate_id()
            self._groups[name] = {"id": group_id, "members": list(members)}
        self.refuse_invites = set(refuse_invites)
        self.fail_create = set(fail_create)
        self.calls: List[Tuple] = []

    def _allocate_id(self) -> int:
        self._next_id += 1
        return self._next_id

    def _group_by_id(self, group_id: Any) -> Dict[str, Any]:
        for group in self._groups.values():
            if group["id"] == group_id:
                return group
        raise KeyError(group_id)

    def _discard(self, email: str) -> None:
        for group in self._groups.values():
            if email in group["members"]:
                group["members"].remove(email)

    def fetch_groups(self) -> List[RemoteGroup]:
        self.calls.append(("fetch_groups",))
        return [make_group(g["id"], name, g["members"]) for name, g in self._groups.items()]

    def invite_users(self, emails: List[str], group_id: Any) -> List[str]:
        self.calls.append(("invite_users", list(emails), group_id))
        refused = [e for e in emails if e in self.refuse_invites]
        for email in emails:
            if email not in refused:
                self._group_by_id(group_id)["members"].append(email)
        return refused

    def delete_users(self, emails: List[str]) -> None:
        self.calls.append(("delete_users", list(emails)))
        for email in emails:
            self._discard(email)

    def create_group(self, name: str) -> None:
        self.calls.append(("create_group", name))
        if name in self.fail_create:
            raise RuntimeError(f"cannot create {name}")
        self._groups[name] = {"id": self._allocate_id(), "members": []}

    def move_users(self, emails: List[str], group_id: Any) -> None:
        self.calls.append(("move_users", list(emails), group_id))
        target = self._group_by_id(group_id)
        for email in emails:
            self._discard(email)
            target["members"].append(email)

    def calls_named(self, name: str) -> List[Tuple]:
        """Return the recorded calls of one operation."""
        return [call for call in self.calls if call[0] == name]

    def membership(self) -> Dict[str, str]:
        """Return email -> group name for every user."""
        return {
            email: name
            for name, group in self._groups.items()
            for email in group["members"]
        }

    def group_id(self, name: str) -> Any:
        return self._groups[name]["id"]


class ScriptedPrompter:
    """Prompter that replays answers and records what was shown."""

    def __init__(self, answers: Sequence[str] = ()):
        self.answers = list(answers)
        self.shown: List[Tuple[str, List[str]]] = []
        self.questions: List[str] = []

    def show_confirmation(self, prompt: str, lines: Sequence[str]) -> None:
        self.shown.append((prompt, list(lines)))

    def ask(self, question: str) -> str:
        self.questions.append(question)
        return self.answers.pop(0)
