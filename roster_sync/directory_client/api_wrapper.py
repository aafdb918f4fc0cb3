"""API wrapper for the directory service REST API.

This module wraps a requests Session and provides error translation from
HTTP exceptions to our typed exception hierarchy. Every call is blocking
and fully consumed before returning; nothing is retried at this layer.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import ConnectionError, HTTPError, Timeout

from roster_sync.reconciler.models import RemoteGroup, RemoteUserRecord

from .auth import Authenticator
from .errors import APIAccessError, APIUnreachableError, InvalidCredentialsError

logger = logging.getLogger(__name__)


class DirectoryAPI:
    """Wrapper around the directory service REST API with error translation.

    This class provides a thin client over the directory service that:
    1. Builds authentication headers using the Authenticator
    2. Encodes requests and decodes responses as JSON
    3. Translates HTTP errors to typed exceptions
    4. Converts the group listing into reconciler models

    Example:
        >>> auth = Authenticator(company_id="8675309", psk="s3cret")
        >>> api = DirectoryAPI(auth)
        >>> groups = api.fetch_groups()
    """

    def __init__(
        self,
        authenticator: Authenticator,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the API wrapper.

        Args:
            authenticator: Authenticator providing credentials and headers
            timeout: Per-request timeout in seconds
            session: Optional pre-built session (mainly for tests)
        """
        self._authenticator = authenticator
        self._timeout = timeout
        self._session = session

    def _get_session(self) -> requests.Session:
        """Get or create the HTTP session, validating credentials on first use."""
        if self._session is None:
            self._session = requests.Session()
            self._session.headers.update(self._authenticator.build_headers())
        return self._session

    def _url(self, path: str) -> str:
        return f"{self._authenticator.get_credentials().url}{path}"

    def _sanitize_credentials(self, text: str) -> str:
        """Mask the pre-shared key and authorization headers in text.

        Args:
            text: Error message or log text to sanitize

        Returns:
            str: Sanitized text

        Example:
            >>> api._sanitize_credentials("Authorization: PSK abc123")
            "Authorization: ***REDACTED***"
        """
        if not text:
            return text

        sanitized = re.sub(
            r'Authorization:\s*[^\n\r]+',
            'Authorization: ***REDACTED***',
            text,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'PSK\s+[^\s\n\r]+',
            'PSK ***REDACTED***',
            sanitized
        )

        psk = self._authenticator.get_credentials().psk
        if psk:
            sanitized = sanitized.replace(psk, '***REDACTED***')
        return sanitized

    def _translate_error(self, exception: Exception, operation: str) -> Exception:
        """Translate transport exceptions to typed directory exceptions.

        Args:
            exception: The original exception raised by requests
            operation: Description of the operation that failed (for messages)

        Returns:
            Exception: Translated exception (one of our typed exceptions)
        """
        creds = self._authenticator.get_credentials()

        if isinstance(exception, (Timeout, ConnectionError)):
            return APIUnreachableError(endpoint=creds.url)

        if isinstance(exception, HTTPError) and exception.response is not None:
            status_code = exception.response.status_code
            if status_code in (401, 403):
                return InvalidCredentialsError(
                    company_id=creds.company_id,
                    endpoint=creds.url
                )
            body = self._sanitize_credentials(exception.response.text or "")[:200]
            return APIAccessError(
                f"{operation} failed with HTTP {status_code}: {body}".rstrip(": ")
            )

        return APIAccessError(
            f"{operation} failed: {self._sanitize_credentials(str(exception))}"
        )

    def _request(
        self,
        method: str,
        path: str,
        operation: str,
        json_body: Any = None,
    ) -> Any:
        """Send a request and return the decoded JSON body (None if empty).

        Raises:
            InvalidCredentialsError: On HTTP 401/403
            APIUnreachableError: On timeouts and connection failures
            APIAccessError: On any other HTTP error or an undecodable body
        """
        session = self._get_session()
        url = self._url(path)
        logger.debug(f"API {method} {url} ({operation})")

        try:
            response = session.request(method, url, json=json_body, timeout=self._timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.debug(f"{operation} failed: {self._sanitize_credentials(str(e))}")
            raise self._translate_error(e, operation) from e

        if not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            raise APIAccessError(f"{operation} returned a non-JSON response") from e

    def fetch_groups(self) -> List[RemoteGroup]:
        """Fetch every group with its members.

        The first group of the listing is the Default group.

        Returns:
            List of RemoteGroup in listing order

        Raises:
            APIAccessError: If the listing is malformed
        """
        data = self._request("GET", "/groups", "fetch_groups")
        if isinstance(data, dict):
            data = data.get("groups")
        if not isinstance(data, list):
            raise APIAccessError("fetch_groups returned an unexpected payload")

        groups = [self._parse_group(item) for item in data]
        logger.info(
            f"Fetched {len(groups)} group(s) with "
            f"{sum(len(g.members) for g in groups)} member(s)"
        )
        return groups

    def _parse_group(self, item: Dict[str, Any]) -> RemoteGroup:
        """Convert one group entry of the listing into a RemoteGroup."""
        if not isinstance(item, dict) or "id" not in item or "name" not in item:
            raise APIAccessError(f"fetch_groups returned a malformed group: {item!r}")

        group_id = item["id"]
        name = item["name"] or ""
        members = []
        for member in item.get("members") or []:
            email = member.get("email") if isinstance(member, dict) else member
            if not email:
                raise APIAccessError(f"Group '{name}' has a member without email")
            members.append(RemoteUserRecord(email=email, group_id=group_id, group_name=name))
        return RemoteGroup(group_id=group_id, name=name, members=members)

    def invite_users(self, emails: List[str], group_id: Any) -> List[str]:
        """Invite users into a group.

        Args:
            emails: Email addresses to invite
            group_id: Group the new users are placed in

        Returns:
            Emails the directory did not invite (empty on full success)
        """
        data = self._request(
            "POST",
            "/users/invite",
            f"invite_users({len(emails)})",
            json_body={"emails": list(emails), "groupId": group_id},
        )
        not_invited = (data or {}).get("notInvited") or []
        logger.debug(f"Invited {len(emails) - len(not_invited)}/{len(emails)} user(s)")
        return list(not_invited)

    def delete_users(self, emails: List[str]) -> None:
        """Delete users. The directory applies a batch all-or-nothing."""
        self._request(
            "DELETE",
            "/users",
            f"delete_users({len(emails)})",
            json_body={"emails": list(emails)},
        )

    def create_group(self, name: str) -> None:
        """Create a group. The new identifier is only visible on re-fetch."""
        self._request(
            "POST",
            "/groups",
            f"create_group({name})",
            json_body={"name": name},
        )

    def move_users(self, emails: List[str], group_id: Any) -> None:
        """Move existing users into a group."""
        self._request(
            "POST",
            f"/groups/{group_id}/members",
            f"move_users({group_id})",
            json_body={"emails": list(emails)},
        )
