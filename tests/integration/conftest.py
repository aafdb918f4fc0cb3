"""Pytest configuration and fixtures for integration tests.

Integration tests run the real DirectoryAPI against an in-process stand-in
for the directory service, so requests are encoded, routed and decoded
exactly as in production without touching the network.
"""

import json
import re
from typing import Any, Dict, List, Optional, Tuple

import pytest
import requests

from roster_sync.directory_client.api_wrapper import DirectoryAPI
from roster_sync.directory_client.auth import Authenticator
from roster_sync.reconciler.models import DEFAULT_GROUP_ID

BASE_URL = "https://directory.test/api"


class DirectoryServiceSession:
    """requests.Session stand-in that serves the directory REST API.

    Groups are kept as a list of {"id", "name", "members"} dicts; the first
    one is Default. Every request is recorded in ``requests`` as
    (method, path, body).
    """

    def __init__(self, groups: List[Dict[str, Any]], refuse_invites=()):
        self.groups = groups
        self.refuse_invites = set(refuse_invites)
        self.headers: Dict[str, str] = {}
        self.requests: List[Tuple[str, str, Any]] = []
        self.fail_status: Optional[int] = None
        self._next_id = 500

    def _response(self, status: int, payload: Any = None) -> requests.Response:
        response = requests.Response()
        response.status_code = status
        response._content = b"" if payload is None else json.dumps(payload).encode("utf-8")
        return response

    def _group(self, group_id: Any) -> Dict[str, Any]:
        return next(g for g in self.groups if g["id"] == group_id)

    def _discard(self, email: str) -> None:
        for group in self.groups:
            if email in group["members"]:
                group["members"].remove(email)

    def request(self, method: str, url: str, json: Any = None, timeout: float = None):
        path = url[len(BASE_URL):]
        self.requests.append((method, path, json))

        if self.fail_status is not None:
            return self._response(self.fail_status, {"error": "rejected"})

        if method == "GET" and path == "/groups":
            return self._response(200, {"groups": [
                {"id": g["id"], "name": g["name"], "members": [{"email": e} for e in g["members"]]}
                for g in self.groups
            ]})

        if method == "POST" and path == "/users/invite":
            refused = [e for e in json["emails"] if e in self.refuse_invites]
            target = self._group(json["groupId"])
            target["members"].extend(e for e in json["emails"] if e not in refused)
            return self._response(200, {"notInvited": refused})

        if method == "DELETE" and path == "/users":
            for email in json["emails"]:
                self._discard(email)
            return self._response(204)

        if method == "POST" and path == "/groups":
            self._next_id += 1
            self.groups.append({"id": self._next_id, "name": json["name"], "members": []})
            return self._response(201)

        match = re.fullmatch(r"/groups/(-?\d+)/members", path)
        if method == "POST" and match:
            target = self._group(int(match.group(1)))
            for email in json["emails"]:
                self._discard(email)
                target["members"].append(email)
            return self._response(200)

        return self._response(404, {"error": f"no route for {method} {path}"})

    def paths(self, method: str) -> List[str]:
        return [path for m, path, _ in self.requests if m == method]

    def membership(self) -> Dict[str, str]:
        return {email: g["name"] for g in self.groups for email in g["members"]}


@pytest.fixture
def directory_session():
    """Directory with john in Default and bob in Admins (id 5)."""
    return DirectoryServiceSession([
        {"id": DEFAULT_GROUP_ID, "name": "Default", "members": ["john@example.com"]},
        {"id": 5, "name": "Admins", "members": ["bob@example.com"]},
    ])


@pytest.fixture
def directory_api(directory_session):
    """DirectoryAPI wired to the in-process directory service."""
    authenticator = Authenticator("8675309", "s3cret", api_url=BASE_URL)
    return DirectoryAPI(authenticator, timeout=5, session=directory_session)
