"""Client for a Nano Studio server's ``POST /api/generate`` endpoint.

Used by the UI when ``server_url`` is configured, so that the Gemini key
stays on the server and calls pass through its access gate.
"""

import logging

import httpx

from .access_gate import ACCESS_HEADER
from .credentials import CredentialCache, MemoryCredentialCache
from .errors import RemoteAPIError, UnauthorizedError
from .generator import ImageGenerator
from .models import GenerationRequest
from .translator import NO_IMAGE_MESSAGE

logger = logging.getLogger(__name__)


def build_studio_payload(request: GenerationRequest) -> dict:
    """Serialise a request in the server's JSON format."""
    return {
        "model": request.model.value,
        "prompt": request.prompt,
        "images": [
            {"data": image.to_base64(), "mimeType": image.mime_type}
            for image in request.reference_images
        ],
        "aspectRatio": request.aspect_ratio,
        "imageSize": request.image_size,
    }


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Request failed ({response.status_code})"
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return f"Request failed ({response.status_code})"


class StudioClient(ImageGenerator):
    """Send generation calls to a Nano Studio server.

    The access code is read from ``credentials`` on every call.  A 401
    answer invalidates it and raises :class:`UnauthorizedError` so the
    caller can ask the user again.
    """

    name = "studio"

    def __init__(
        self,
        server_url: str,
        credentials: CredentialCache | None = None,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.server_url = server_url.rstrip("/")
        self.credentials = credentials or MemoryCredentialCache()
        self.timeout = timeout
        self._transport = transport

    async def generate_images(self, request: GenerationRequest) -> list[str]:
        headers = {"Content-Type": "application/json"}
        credential = self.credentials.get()
        if credential:
            headers[ACCESS_HEADER] = credential

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self.server_url}/api/generate",
                    headers=headers,
                    json=build_studio_payload(request),
                )
        except httpx.HTTPError as e:
            logger.error(f"Nano Studio server request failed: {e}")
            raise RemoteAPIError(f"Could not reach the Nano Studio server: {e}") from e

        if response.status_code == 401:
            self.credentials.invalidate()
            raise UnauthorizedError(_error_message(response))

        if response.is_error:
            raise RemoteAPIError(_error_message(response), status_code=response.status_code)

        try:
            images = response.json().get("images") or []
        except (ValueError, AttributeError) as e:
            raise RemoteAPIError("The Nano Studio server returned a malformed response") from e

        if not images:
            raise RemoteAPIError(NO_IMAGE_MESSAGE)
        return list(images)
