"""Client-side cache for the server access code.

The UI asks the user for the access code once, keeps it here, and sends it
with every call.  When the server rejects it the cache is invalidated so
the user is prompted again.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class CredentialCache(ABC):
    """Capability for storing one access credential."""

    @abstractmethod
    def get(self) -> str | None:
        """Return the cached credential, or ``None`` if there is none."""

    @abstractmethod
    def set(self, value: str) -> None:
        """Cache ``value``; an empty value invalidates the cache."""

    @abstractmethod
    def invalidate(self) -> None:
        """Forget the cached credential."""


class MemoryCredentialCache(CredentialCache):
    def __init__(self, value: str | None = None):
        self._value = value or None

    def get(self) -> str | None:
        return self._value

    def set(self, value: str) -> None:
        self._value = value.strip() or None

    def invalidate(self) -> None:
        self._value = None


class FileCredentialCache(CredentialCache):
    """Credential cache persisted to a small text file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def get(self) -> str | None:
        if not self.path.exists():
            return None
        value = self.path.read_text(encoding="utf-8").strip()
        return value or None

    def set(self, value: str) -> None:
        value = value.strip()
        if not value:
            self.invalidate()
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(value, encoding="utf-8")
        logger.debug(f"Cached access code in {self.path}")

    def invalidate(self) -> None:
        if self.path.exists():
            self.path.unlink()
            logger.info("Cached access code invalidated")
