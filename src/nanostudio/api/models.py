"""Pydantic request and response models for the Nano Studio API.

Models
------
GenerateRequest
    Payload for ``POST /api/generate``.  Field names follow the camelCase
    JSON the browser and :class:`~nanostudio.core.studio_client.StudioClient`
    send; snake_case names are accepted too.
GenerateResponse
    Success body: ``{"images": [dataURL, ...]}``.
ErrorResponse
    Failure body: ``{"error": "...", "code": "UNAUTHORIZED"}`` (code only on 401).
"""

from __future__ import annotations

import binascii

from pydantic import BaseModel, ConfigDict, Field

from nanostudio.core.errors import ValidationError
from nanostudio.core.models import (
    ASPECT_RATIOS,
    DEFAULT_ASPECT_RATIO,
    DEFAULT_IMAGE_SIZE,
    IMAGE_SIZES,
    GenerationRequest,
    ModelId,
    ReferenceImage,
)


class ImagePayload(BaseModel):
    """One reference image as base64 text plus its MIME type.

    Attributes:
        data: Base64-encoded image bytes, without a ``data:`` prefix.
        mime_type: MIME type; ``image/jpeg`` is assumed when missing.
    """

    model_config = ConfigDict(populate_by_name=True)

    data: str = Field(..., description="Base64-encoded image bytes.")
    mime_type: str | None = Field(
        default=None,
        alias="mimeType",
        description="MIME type of the image (defaults to image/jpeg).",
    )


class GenerateRequest(BaseModel):
    """Request body for the ``POST /api/generate`` endpoint.

    Attributes:
        model: Model id (``gemini-2.5-flash-image`` or
            ``gemini-3-pro-image-preview``); labels and enum names are
            accepted as well.
        prompt: Text prompt.  May be empty when reference images are given.
        images: Reference images in upload order.
        image_base64: Single reference image from older clients.  Appended
            after ``images``.
        legacy_mime_type: MIME type for ``image_base64``.
        aspect_ratio: One of ``1:1``, ``3:4``, ``4:3``, ``9:16``, ``16:9``.
        image_size: One of ``1K``, ``2K``, ``4K``; only used by the Pro model.
    """

    model_config = ConfigDict(populate_by_name=True)

    model: str = Field(
        default=ModelId.FAST.value,
        description="Model identifier.",
    )
    prompt: str = Field(
        default="",
        description="Text prompt (may be empty when reference images are given).",
    )
    images: list[ImagePayload] = Field(
        default_factory=list,
        description="Reference images in upload order.",
    )
    image_base64: str | None = Field(
        default=None,
        alias="imageBase64",
        description="Single reference image (older clients).",
    )
    legacy_mime_type: str | None = Field(
        default=None,
        alias="mimeType",
        description="MIME type for imageBase64.",
    )
    aspect_ratio: str | None = Field(
        default=DEFAULT_ASPECT_RATIO,
        alias="aspectRatio",
        description="Aspect ratio preset.",
    )
    image_size: str | None = Field(
        default=DEFAULT_IMAGE_SIZE,
        alias="imageSize",
        description="Output resolution (Pro model only).",
    )

    def to_generation_request(self) -> GenerationRequest:
        """Convert the wire body into a :class:`GenerationRequest`.

        Raises:
            ValidationError: For an unknown model, aspect ratio or image
                size, or reference image data that is not valid base64.
        """
        try:
            model = ModelId.from_value(self.model)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        if self.aspect_ratio and self.aspect_ratio not in ASPECT_RATIOS:
            raise ValidationError(f"Unsupported aspect ratio: {self.aspect_ratio}")
        if self.image_size and self.image_size not in IMAGE_SIZES:
            raise ValidationError(f"Unsupported image size: {self.image_size}")

        payloads = [(image.data, image.mime_type) for image in self.images]
        if self.image_base64:
            payloads.append((self.image_base64, self.legacy_mime_type))

        try:
            reference_images = [
                ReferenceImage.from_base64(data, mime_type) for data, mime_type in payloads
            ]
        except (binascii.Error, ValueError) as e:
            raise ValidationError("Reference image data is not valid base64") from e

        return GenerationRequest(
            model=model,
            prompt=self.prompt,
            reference_images=reference_images,
            aspect_ratio=self.aspect_ratio or DEFAULT_ASPECT_RATIO,
            image_size=self.image_size,
        )


class GenerateResponse(BaseModel):
    """Success body for ``POST /api/generate``."""

    images: list[str] = Field(..., description="Generated images as data URLs.")


class ErrorResponse(BaseModel):
    """Failure body shared by every endpoint."""

    error: str = Field(..., description="User-facing error message.")
    code: str | None = Field(default=None, description="Machine-readable code, e.g. UNAUTHORIZED.")
