"""Authentication module for the directory service.

This module turns the company ID and pre-shared key given on the command
line into request headers, and resolves the API base URL from the
environment using python-dotenv.
"""

import os
from typing import Dict, NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError

DEFAULT_API_URL = "https://api.example.com/v1"


class Credentials(NamedTuple):
    """Directory service credentials."""
    url: str
    company_id: str
    psk: str


class Authenticator:
    """Builds and validates directory service credentials.

    The pre-shared key is never logged. The API base URL comes from, in
    order: the explicit ``api_url`` argument, the ``ROSTER_SYNC_API_URL``
    environment variable (a .env file is honoured), then DEFAULT_API_URL.

    Raises:
        InvalidCredentialsError: If the company ID or pre-shared key is empty

    Example:
        >>> auth = Authenticator(company_id="8675309", psk="s3cret")
        >>> creds = auth.get_credentials()
        >>> headers = auth.build_headers()
    """

    def __init__(self, company_id: str, psk: str, api_url: Optional[str] = None):
        """Initialize the authenticator and load environment variables from .env.

        Args:
            company_id: Company (tenant) identifier at the directory service
            psk: Pre-shared key issued for the company
            api_url: Optional API base URL overriding the environment
        """
        load_dotenv()
        self._company_id = company_id
        self._psk = psk
        self._api_url = api_url

    def get_credentials(self) -> Credentials:
        """Get validated credentials.

        Returns:
            Credentials: A named tuple containing url, company_id and psk

        Raises:
            InvalidCredentialsError: If company ID or pre-shared key is missing
        """
        url = self._api_url or os.getenv("ROSTER_SYNC_API_URL") or DEFAULT_API_URL
        company_id = (self._company_id or "").strip()
        psk = (self._psk or "").strip()

        if not company_id or not psk:
            raise InvalidCredentialsError(
                company_id=company_id if company_id else "unknown",
                endpoint=url,
            )

        return Credentials(url=url.rstrip("/"), company_id=company_id, psk=psk)

    def build_headers(self) -> Dict[str, str]:
        """Build the authentication and content headers for every request."""
        creds = self.get_credentials()
        return {
            "X-Company-Id": creds.company_id,
            "Authorization": f"PSK {creds.psk}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
