"""State management for the Nano Studio UI.

The UI keeps one :class:`StudioSession` for the lifetime of the app.  It
bundles the orchestrator (with its store and generator), the access-code
cache, and the tracker of in-flight generation calls.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field

from nanostudio.core.config import StudioConfig
from nanostudio.core.credentials import CredentialCache, FileCredentialCache
from nanostudio.core.gemini_client import GeminiClient
from nanostudio.core.generator import ImageGenerator
from nanostudio.core.image_store import SQLiteImageStore
from nanostudio.core.orchestrator import GenerationOrchestrator
from nanostudio.core.studio_client import StudioClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingGeneration:
    """A generation call that has started but not yet resolved."""

    call_id: str
    prompt: str
    model: str
    started_at: float


class PendingTracker:
    """Map of call id to in-flight call.

    Each call registers itself and removes only its own entry when it
    resolves, so calls may finish in any order.
    """

    def __init__(self):
        self._pending: dict[str, PendingGeneration] = {}

    def start(self, prompt: str, model: str) -> str:
        """Register a new in-flight call and return its id."""
        call_id = str(uuid.uuid4())
        self._pending[call_id] = PendingGeneration(
            call_id=call_id, prompt=prompt, model=model, started_at=time.time()
        )
        return call_id

    def resolve(self, call_id: str) -> None:
        self._pending.pop(call_id, None)

    def active(self) -> list[PendingGeneration]:
        """In-flight calls, oldest first."""
        return sorted(self._pending.values(), key=lambda pending: pending.started_at)

    def __len__(self) -> int:
        return len(self._pending)

    def __contains__(self, call_id: str) -> bool:
        return call_id in self._pending


@dataclass
class StudioSession:
    """Everything the UI handlers need.

    Attributes
    ----------
    orchestrator : GenerationOrchestrator
        Runs generation calls and owns the image store.
    credentials : CredentialCache | None
        Access-code cache; only set when routing through a server.
    pending : PendingTracker
        In-flight calls shown as placeholders.
    settings : StudioConfig | None
        Configuration the session was built from.
    """

    orchestrator: GenerationOrchestrator
    credentials: CredentialCache | None = None
    pending: PendingTracker = field(default_factory=PendingTracker)
    settings: StudioConfig | None = None

    @property
    def requires_access_code(self) -> bool:
        return self.credentials is not None

    def __repr__(self) -> str:
        return (
            f"StudioSession(generator={self.orchestrator.generator!r}, "
            f"pending={len(self.pending)})"
        )


def build_generator(settings: StudioConfig, credentials: CredentialCache | None) -> ImageGenerator:
    """Pick the generation backend from configuration.

    With ``server_url`` set the UI goes through a Nano Studio server;
    otherwise it calls Gemini directly with the local API key.
    """
    if settings.server_url:
        logger.info(f"Routing generation through {settings.server_url}")
        return StudioClient(
            settings.server_url,
            credentials=credentials,
            timeout=settings.request_timeout,
        )
    logger.info("Calling the Gemini API directly")
    return GeminiClient.from_config(settings)


def initialize_session(settings: StudioConfig) -> StudioSession:
    """Create the session components from configuration.

    Raises:
        StoreError: If the gallery database cannot be opened.
    """
    logger.info("Initializing StudioSession")
    credentials = FileCredentialCache(settings.credential_file) if settings.server_url else None
    store = SQLiteImageStore(settings.gallery_db)
    orchestrator = GenerationOrchestrator(build_generator(settings, credentials), store)
    session = StudioSession(orchestrator=orchestrator, credentials=credentials, settings=settings)
    logger.info(f"StudioSession ready: {session}")
    return session
