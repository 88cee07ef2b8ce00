"""Data models shared by the translator, orchestrator, store and UI."""

import base64
import mimetypes
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal

AspectRatio = Literal["1:1", "3:4", "4:3", "9:16", "16:9"]
ImageSize = Literal["1K", "2K", "4K"]

ASPECT_RATIOS: tuple[str, ...] = ("1:1", "3:4", "4:3", "9:16", "16:9")
IMAGE_SIZES: tuple[str, ...] = ("1K", "2K", "4K")

DEFAULT_ASPECT_RATIO = "1:1"
DEFAULT_IMAGE_SIZE = "1K"
DEFAULT_REFERENCE_MIME = "image/jpeg"
DEFAULT_OUTPUT_MIME = "image/png"


class ModelId(str, Enum):
    """Remote model variants.

    ``FAST`` is the base flash image model; ``PRO`` is the high-resolution
    preview model and the only one that honours ``image_size``.
    """

    FAST = "gemini-2.5-flash-image"
    PRO = "gemini-3-pro-image-preview"

    @property
    def label(self) -> str:
        """Human-readable name stored alongside generated images."""
        return MODEL_LABELS[self]

    @classmethod
    def from_value(cls, value: "str | ModelId") -> "ModelId":
        """Resolve a model id, label or enum member name to a ``ModelId``.

        Raises:
            ValueError: If the value matches no known model.
        """
        if isinstance(value, ModelId):
            return value
        for member in cls:
            if value in (member.value, member.name, member.label):
                return member
        raise ValueError(f"Unknown model: {value}")


MODEL_LABELS: dict[ModelId, str] = {
    ModelId.FAST: "Nano",
    ModelId.PRO: "Nano Pro",
}


@dataclass(frozen=True)
class ReferenceImage:
    """A user-supplied input image, kept as raw bytes until encoded."""

    data: bytes
    mime_type: str | None = None

    @classmethod
    def from_base64(cls, data: str, mime_type: str | None = None) -> "ReferenceImage":
        """Build a reference image from base64 text (no data URL prefix)."""
        return cls(data=base64.b64decode(data, validate=True), mime_type=mime_type or None)

    @classmethod
    def from_path(cls, path: str | Path) -> "ReferenceImage":
        """Read a reference image from disk, guessing the MIME type from its name."""
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        return cls(data=path.read_bytes(), mime_type=mime_type)

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


@dataclass
class GenerationRequest:
    """Everything needed for a single generation call. Never persisted."""

    model: ModelId = ModelId.FAST
    prompt: str = ""
    reference_images: list[ReferenceImage] = field(default_factory=list)
    aspect_ratio: str | None = DEFAULT_ASPECT_RATIO
    image_size: str | None = DEFAULT_IMAGE_SIZE

    def has_input(self) -> bool:
        """Whether the request carries a usable prompt or any reference image."""
        return bool(self.prompt and self.prompt.strip()) or bool(self.reference_images)


@dataclass(frozen=True)
class GeneratedImage:
    """One image returned by the remote API.

    Attributes:
        id: Client-generated UUID string, unique across the store.
        url: ``data:<mime>;base64,<payload>`` URL holding the image bytes.
        prompt: Prompt text used for the call (may be empty).
        model: Human-readable model label (``"Nano"`` or ``"Nano Pro"``).
        timestamp: Creation time in epoch milliseconds.
    """

    id: str
    url: str
    prompt: str
    model: str
    timestamp: int

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "GeneratedImage":
        return cls(
            id=str(data["id"]),
            url=str(data["url"]),
            prompt=str(data.get("prompt") or ""),
            model=str(data["model"]),
            timestamp=int(data["timestamp"]),
        )
