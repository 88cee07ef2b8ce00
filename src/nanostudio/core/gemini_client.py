"""Direct client for the Gemini ``generateContent`` REST endpoint."""

import logging

import httpx

from .errors import RemoteAPIError
from .generator import ImageGenerator
from .models import GenerationRequest
from .translator import build_payload, describe_http_error, parse_response

logger = logging.getLogger(__name__)

INVALID_KEY_MESSAGE = "The Gemini API key is invalid; check the server configuration"


class GeminiClient(ImageGenerator):
    """Call the Gemini API with one request per generation.

    Args:
        api_key: Gemini API key.  Sent in the ``x-goog-api-key`` header so it
            never appears in logged URLs.
        base_url: API root, e.g. ``https://generativelanguage.googleapis.com/v1beta``.
        timeout: Seconds to wait for the whole call.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    name = "gemini"

    def __init__(
        self,
        api_key: str | None,
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_config(cls, config) -> "GeminiClient":
        return cls(
            api_key=config.gemini_api_key,
            base_url=config.api_base_url,
            timeout=config.request_timeout,
        )

    def endpoint(self, request: GenerationRequest) -> str:
        return f"{self.base_url}/models/{request.model.value}:generateContent"

    async def generate_images(self, request: GenerationRequest) -> list[str]:
        if not self.api_key:
            raise RemoteAPIError("The Gemini API key is not configured")

        payload = build_payload(request)
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.endpoint(request), headers=headers, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e}")
            raise RemoteAPIError(f"Could not reach the image API: {e}") from e

        if response.is_error:
            message = describe_http_error(response.status_code, response.text)
            logger.error(message)
            if "API key" in message:
                raise RemoteAPIError(INVALID_KEY_MESSAGE, status_code=response.status_code)
            raise RemoteAPIError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteAPIError("The image API returned a malformed response") from e

        return parse_response(data)
