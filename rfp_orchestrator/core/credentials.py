"""Process-held bearer credential for backend calls."""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


class CredentialStore:
    """
    Holds the bearer token attached to backend requests.

    Absence of a token is not an error; calls go out anonymously and
    the backend decides. A 401 from the backend clears the token.
    """

    def __init__(self, token: Optional[str] = None):
        self._token = token or None

    @property
    def token(self) -> Optional[str]:
        return self._token

    def clear(self) -> None:
        if self._token is not None:
            logger.warning("Clearing held backend credential")
        self._token = None

    def auth_headers(self) -> dict:
        """Authorization header for the current token, or nothing."""
        if not self._token:
            return {}
        return {"Authorization": f"Bearer {self._token}"}
