"""Translation between generation requests and the Gemini REST wire format.

The remote ``generateContent`` endpoint takes a list of content parts and a
generation config, and answers with candidates whose parts are either
inline image data or text.  This module is pure: it never performs I/O, so
the payload shaping and response parsing can be tested in isolation.

Request payload shape::

    {
        "contents": [{"parts": [<inlineData part>..., <text part>]}],
        "generationConfig": {"imageConfig": {"aspectRatio": "1:1", "imageSize": "2K"}}
    }

Response shape::

    {"candidates": [{"content": {"parts": [{"inlineData": {...}} | {"text": "..."}]}}]}
"""

from __future__ import annotations

import base64
import json

from nanostudio.core.errors import RemoteAPIError
from nanostudio.core.models import (
    DEFAULT_ASPECT_RATIO,
    DEFAULT_OUTPUT_MIME,
    DEFAULT_REFERENCE_MIME,
    GenerationRequest,
    ModelId,
)

NO_IMAGE_MESSAGE = "The API call succeeded but produced no image data"


# ---------------------------------------------------------------------------
# Data URL helpers.
# ---------------------------------------------------------------------------


def to_data_url(data: str, mime_type: str = DEFAULT_OUTPUT_MIME) -> str:
    """Wrap base64 text in a ``data:`` URL."""
    return f"data:{mime_type};base64,{data}"


def split_data_url(url: str) -> tuple[str, str]:
    """Split a base64 data URL into ``(mime_type, base64_payload)``.

    Raises:
        ValueError: If ``url`` is not a base64 ``data:`` URL.
    """
    if not url.startswith("data:") or "," not in url:
        raise ValueError("Not a data URL")
    header, payload = url[5:].split(",", 1)
    if not header.endswith(";base64"):
        raise ValueError("Data URL is not base64 encoded")
    mime_type = header[: -len(";base64")] or DEFAULT_OUTPUT_MIME
    return mime_type, payload


def decode_data_url(url: str) -> bytes:
    """Return the raw bytes held by a base64 data URL."""
    _, payload = split_data_url(url)
    return base64.b64decode(payload)


# ---------------------------------------------------------------------------
# Request building.
# ---------------------------------------------------------------------------


def build_parts(request: GenerationRequest) -> list[dict]:
    """Build the ordered content parts for a request.

    Reference images come first, in upload order, followed by the prompt
    text when it is non-empty.
    """
    parts: list[dict] = []

    for image in request.reference_images:
        parts.append(
            {
                "inlineData": {
                    "mimeType": image.mime_type or DEFAULT_REFERENCE_MIME,
                    "data": image.to_base64(),
                }
            }
        )

    if request.prompt:
        parts.append({"text": request.prompt})

    return parts


def build_image_config(request: GenerationRequest) -> dict:
    """Build the ``imageConfig`` block.

    ``imageSize`` is only understood by the Pro model and is left out for
    the base model whatever the request asked for.
    """
    image_config = {"aspectRatio": request.aspect_ratio or DEFAULT_ASPECT_RATIO}
    if request.model == ModelId.PRO and request.image_size:
        image_config["imageSize"] = request.image_size
    return image_config


def build_payload(request: GenerationRequest) -> dict:
    """Build the full ``generateContent`` request body."""
    return {
        "contents": [{"parts": build_parts(request)}],
        "generationConfig": {"imageConfig": build_image_config(request)},
    }


# ---------------------------------------------------------------------------
# Response parsing.
# ---------------------------------------------------------------------------


def _response_parts(data: dict) -> list[dict]:
    """Return the parts of the first candidate, or an empty list."""
    if not isinstance(data, dict):
        return []
    candidates = data.get("candidates") or []
    if not isinstance(candidates, list) or not candidates or not isinstance(candidates[0], dict):
        return []
    content = candidates[0].get("content") or {}
    if not isinstance(content, dict):
        return []
    parts = content.get("parts") or []
    if not isinstance(parts, list):
        return []
    return [part for part in parts if isinstance(part, dict)]


def parse_response(data: dict) -> list[str]:
    """Extract every inline image from a ``generateContent`` response.

    Args:
        data: Decoded JSON response body.

    Returns:
        Data URLs in the order the API returned them.

    Raises:
        RemoteAPIError: If the response holds no image.  When the model
            answered with text instead (a safety refusal, for instance) that
            text is passed through in the message.
    """
    parts = _response_parts(data)
    urls: list[str] = []

    for part in parts:
        inline = part.get("inlineData") or part.get("inline_data")
        if isinstance(inline, dict) and inline.get("data"):
            mime_type = inline.get("mimeType") or inline.get("mime_type") or DEFAULT_OUTPUT_MIME
            urls.append(to_data_url(inline["data"], mime_type))

    if urls:
        return urls

    text = next((part["text"] for part in parts if part.get("text")), None)
    if text:
        raise RemoteAPIError(f"Generation failed: {text}")
    raise RemoteAPIError(NO_IMAGE_MESSAGE)


def describe_http_error(status_code: int, body: str) -> str:
    """Turn a non-success response into a user-facing message.

    The structured ``error.message`` field is preferred; otherwise the raw
    body is passed through.
    """
    try:
        payload = json.loads(body)
    except ValueError:
        payload = None

    if isinstance(payload, dict):
        error = payload.get("error")
        if isinstance(error, dict) and error.get("message"):
            return f"Remote API error ({status_code}): {error['message']}"
        if isinstance(error, str) and error:
            return f"Remote API error ({status_code}): {error}"

    return f"Remote API error ({status_code}): {body}"
