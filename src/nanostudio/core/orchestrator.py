"""Coordination of a single generation call.

The orchestrator is the only place that turns a :class:`GenerationRequest`
into stored :class:`GeneratedImage` records:

1. validate the request (before any network call),
2. ask the injected :class:`ImageGenerator` for images,
3. wrap each returned data URL in a ``GeneratedImage`` with a fresh id,
4. append the whole batch to the injected :class:`ImageStore`,
5. return the batch.

A failure at any step raises and leaves the store untouched.  Calls share
no mutable state besides the store, so any number may run concurrently.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Callable

from .errors import StudioError, ValidationError
from .generator import ImageGenerator
from .image_store import ImageStore
from .models import GeneratedImage, GenerationRequest

logger = logging.getLogger(__name__)

EMPTY_REQUEST_MESSAGE = "Enter a prompt or upload a reference image"


def _new_id() -> str:
    return str(uuid.uuid4())


def _now_ms() -> int:
    return int(time.time() * 1000)


def validate_request(request: GenerationRequest) -> None:
    """Reject requests with neither prompt text nor reference images.

    Raises:
        ValidationError: If the prompt is empty or whitespace-only and no
            reference image is attached.
    """
    if not request.has_input():
        raise ValidationError(EMPTY_REQUEST_MESSAGE)


class GenerationOrchestrator:
    """Run generation calls against a generator and persist the results.

    Args:
        generator: Backend performing the remote call.
        store: Repository receiving successful batches.
        id_factory: Produces a unique id per image (uuid4 by default).
        clock: Returns the current time in epoch milliseconds.
    """

    def __init__(
        self,
        generator: ImageGenerator,
        store: ImageStore,
        id_factory: Callable[[], str] = _new_id,
        clock: Callable[[], int] = _now_ms,
    ):
        self.generator = generator
        self.store = store
        self._id_factory = id_factory
        self._clock = clock

    async def generate(self, request: GenerationRequest) -> list[GeneratedImage]:
        """Run one generation call.

        Args:
            request: Parameters collected from the form.

        Returns:
            The generated images in the order the API returned them.  They
            are already stored when this returns.

        Raises:
            ValidationError: Empty request; raised before any network call.
            UnauthorizedError: The server rejected the access code.
            RemoteAPIError: The remote call failed or produced no image.
            StoreError: The batch could not be persisted.
        """
        validate_request(request)

        label = request.model.label
        logger.info(
            f"Generating with {label}: {len(request.reference_images)} reference image(s), "
            f"aspect ratio {request.aspect_ratio}"
        )

        try:
            urls = await self.generator.generate_images(request)
        except StudioError as e:
            logger.error(f"Generation with {label} failed: {e.message}")
            raise

        timestamp = self._clock()
        images = [
            GeneratedImage(
                id=self._id_factory(),
                url=url,
                prompt=request.prompt,
                model=label,
                timestamp=timestamp,
            )
            for url in urls
        ]

        self.store.append_many(images)
        logger.info(f"Stored {len(images)} image(s) from {label}")
        return images

    def history(self) -> list[GeneratedImage]:
        """Return the stored gallery, newest first."""
        return self.store.get_all()

    def clear_history(self) -> None:
        self.store.clear()
        logger.info("Gallery cleared")
