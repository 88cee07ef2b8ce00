"""Event handlers for the Nano Studio UI.

Handlers take plain Python values and a :class:`StudioSession` and return
plain values (gallery items and status markdown), so they can be tested
without a running Gradio app.
"""

import logging
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

from PIL import Image, UnidentifiedImageError

from nanostudio.core.errors import StudioError, UnauthorizedError, ValidationError
from nanostudio.core.image_utils import export_image, to_pil_image
from nanostudio.core.models import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_IMAGE_SIZE,
    GeneratedImage,
    GenerationRequest,
    ModelId,
    ReferenceImage,
)
from nanostudio.core.orchestrator import validate_request

from .state import StudioSession

logger = logging.getLogger(__name__)

GalleryItems = list[tuple[Image.Image, str]]

MODEL_CHOICES = [ModelId.FAST.label, ModelId.PRO.label]


def _file_path(file: Any) -> Path:
    """Gradio passes uploads as path strings or as objects with ``.name``."""
    if isinstance(file, (str, Path)):
        return Path(file)
    return Path(file.name)


def load_reference_images(files: list[Any] | None) -> list[ReferenceImage]:
    """Read uploaded reference images in upload order.

    Raises:
        ValidationError: If an uploaded file cannot be read.
    """
    images = []
    for file in files or []:
        path = _file_path(file)
        try:
            images.append(ReferenceImage.from_path(path))
        except OSError as e:
            raise ValidationError(f"Could not read {path.name}: {e}") from e
    return images


def build_request(
    prompt: str | None,
    model_label: str,
    aspect_ratio: str | None,
    image_size: str | None,
    files: list[Any] | None,
) -> GenerationRequest:
    """Collect form values into a :class:`GenerationRequest`.

    Raises:
        ValidationError: Unknown model or unreadable upload.
    """
    try:
        model = ModelId.from_value(model_label)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    return GenerationRequest(
        model=model,
        prompt=prompt or "",
        reference_images=load_reference_images(files),
        aspect_ratio=aspect_ratio or DEFAULT_ASPECT_RATIO,
        image_size=image_size or DEFAULT_IMAGE_SIZE,
    )


def _displayed_images(session: StudioSession) -> tuple[GalleryItems, list[GeneratedImage]]:
    """Decode the store for display, newest first.

    Returns the gallery items together with the images they show, index
    for index.  Entries whose data cannot be decoded are logged and left
    out of both lists; they stay in the store.

    Raises:
        StoreError: If the store cannot be read.
    """
    items: GalleryItems = []
    shown: list[GeneratedImage] = []
    for image in session.orchestrator.history():
        try:
            pil_image = to_pil_image(image)
        except (ValueError, UnidentifiedImageError) as e:
            logger.warning(f"Skipping undecodable gallery image {image.id}: {e}")
            continue
        caption = f"{image.model} · {image.prompt}" if image.prompt else image.model
        items.append((pil_image, caption))
        shown.append(image)
    return items, shown


def render_gallery(session: StudioSession) -> GalleryItems:
    """Build gallery items from the store, newest first."""
    items, _ = _displayed_images(session)
    return items


def _gallery_status(session: StudioSession) -> tuple[GalleryItems, str]:
    """Render the gallery, or return an empty one and an error line."""
    try:
        return render_gallery(session), ""
    except StudioError as e:
        logger.error(f"Could not load the gallery: {e.message}")
        return [], f"❌ {e.message}"


def pending_status(session: StudioSession) -> str:
    count = len(session.pending)
    if count == 0:
        return ""
    return f"⏳ {count} generation(s) in progress..."


def _with_pending(session: StudioSession, *messages: str) -> str:
    lines = [message for message in (*messages, pending_status(session)) if message]
    return "\n\n".join(lines)


async def generate_image(
    session: StudioSession,
    prompt: str | None,
    model_label: str,
    aspect_ratio: str | None,
    image_size: str | None,
    files: list[Any] | None,
    access_code: str | None = None,
) -> AsyncIterator[tuple[GalleryItems, str, str]]:
    """Run one generation call from the form.

    Yields twice: first with the call's pending placeholder registered,
    then with the refreshed gallery and the outcome.  Each yield is
    ``(gallery_items, status_markdown, access_code)``; the access code is
    blanked when the server rejects it so the user is prompted again.

    Invalid input, or an access code that cannot be cached, is reported
    with a single yield and never registers a pending call.  Store read
    failures are reported in the status line.
    """
    access_code = (access_code or "").strip()
    if session.credentials is not None and access_code:
        try:
            session.credentials.set(access_code)
        except OSError as e:
            logger.error(f"Could not cache access code: {e}")
            gallery, error = _gallery_status(session)
            message = f"❌ Could not save the access code: {e}"
            yield gallery, _with_pending(session, message, error), access_code
            return

    try:
        request = build_request(prompt, model_label, aspect_ratio, image_size, files)
        validate_request(request)
    except ValidationError as e:
        gallery, error = _gallery_status(session)
        yield gallery, _with_pending(session, f"❌ {e.message}", error), access_code
        return

    call_id = session.pending.start(request.prompt, request.model.label)
    try:
        gallery, error = _gallery_status(session)
        yield gallery, _with_pending(session, error), access_code

        images = await session.orchestrator.generate(request)
        message = f"✅ Generated {len(images)} image(s) with {request.model.label}"
    except UnauthorizedError as e:
        logger.warning(f"Access code rejected: {e.message}")
        access_code = ""
        message = f"🔒 {e.message}. Enter the access code and try again."
    except StudioError as e:
        message = f"❌ {e.message}"
    finally:
        session.pending.resolve(call_id)

    gallery, error = _gallery_status(session)
    yield gallery, _with_pending(session, message, error), access_code


def clear_gallery(session: StudioSession) -> tuple[GalleryItems, str]:
    """Empty the gallery."""
    try:
        session.orchestrator.clear_history()
    except StudioError as e:
        gallery, error = _gallery_status(session)
        return gallery, error or f"❌ {e.message}"
    return [], "🗑️ Gallery cleared"


def export_selected(session: StudioSession, index: int | None) -> str:
    """Save the gallery image shown at ``index`` to the outputs directory."""
    if index is None:
        return ""
    try:
        _, shown = _displayed_images(session)
    except StudioError as e:
        return f"❌ {e.message}"
    if index < 0 or index >= len(shown):
        return "❌ Image not found"

    directory = session.settings.outputs_dir if session.settings else Path("outputs")
    try:
        path = export_image(shown[index], directory)
    except (OSError, ValueError) as e:
        logger.error(f"Export failed: {e}")
        return f"❌ Export failed: {e}"
    return f"💾 Saved to `{path}`"


def refresh_gallery(session: StudioSession) -> tuple[GalleryItems, str]:
    """Reload the gallery from the store (page load)."""
    items, error = _gallery_status(session)
    return items, error or f"{len(items)} image(s)"
