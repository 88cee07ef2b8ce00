"""Shared-secret gate in front of the generation endpoint."""

import hmac
import logging

from .errors import UnauthorizedError

logger = logging.getLogger(__name__)

ACCESS_HEADER = "X-Access-Code"


class AccessGate:
    """Reject generation calls that do not carry the configured secret.

    With no secret configured the gate lets everything through.
    """

    def __init__(self, secret: str | None = None):
        self._secret = secret or None

    @property
    def enabled(self) -> bool:
        return self._secret is not None

    def check(self, credential: str | None) -> None:
        """Validate a credential.

        Raises:
            UnauthorizedError: If the gate is enabled and ``credential`` is
                missing or does not match.
        """
        if not self.enabled:
            return

        if not credential:
            logger.warning("Generation call rejected: no access code")
            raise UnauthorizedError("Access code required")

        if not hmac.compare_digest(credential.encode("utf-8"), self._secret.encode("utf-8")):
            logger.warning("Generation call rejected: wrong access code")
            raise UnauthorizedError("Access code incorrect")
