"""In-memory holder for the Microsoft Graph bearer token."""

import logging

logger = logging.getLogger(__name__)


class CredentialHolder:
    """Holds at most one bearer token for the lifetime of the process.

    Shared by every front-end in the process. Reads and writes are not
    locked: a ``set_token`` racing an in-flight request is allowed, and the
    request uses whichever value it read when it built its headers.
    """

    def __init__(self) -> None:
        self._token: str | None = None

    def set_token(self, token: str) -> None:
        """Store ``token``, replacing any previous value."""
        replaced = self._token is not None
        self._token = token
        logger.info("Access token %s", "replaced" if replaced else "set")

    def current_token(self) -> str | None:
        """Return the stored token, or None when none has been set."""
        return self._token

    @property
    def has_token(self) -> bool:
        return self._token is not None

    def __repr__(self) -> str:
        # Never expose the token itself
        return f"CredentialHolder(has_token={self.has_token})"
