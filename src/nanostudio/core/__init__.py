"""Core components: data models, translation, generators, storage and access control."""

from .access_gate import ACCESS_HEADER, AccessGate
from .config import StudioConfig, config
from .credentials import CredentialCache, FileCredentialCache, MemoryCredentialCache
from .errors import RemoteAPIError, StoreError, StudioError, UnauthorizedError, ValidationError
from .gemini_client import GeminiClient
from .generator import ImageGenerator
from .image_store import ImageStore, InMemoryImageStore, SQLiteImageStore
from .models import (
    ASPECT_RATIOS,
    IMAGE_SIZES,
    GeneratedImage,
    GenerationRequest,
    ModelId,
    ReferenceImage,
)
from .orchestrator import GenerationOrchestrator
from .studio_client import StudioClient

__all__ = [
    "ACCESS_HEADER",
    "ASPECT_RATIOS",
    "IMAGE_SIZES",
    "AccessGate",
    "CredentialCache",
    "FileCredentialCache",
    "GeminiClient",
    "GeneratedImage",
    "GenerationOrchestrator",
    "GenerationRequest",
    "ImageGenerator",
    "ImageStore",
    "InMemoryImageStore",
    "MemoryCredentialCache",
    "ModelId",
    "ReferenceImage",
    "RemoteAPIError",
    "SQLiteImageStore",
    "StoreError",
    "StudioClient",
    "StudioConfig",
    "StudioError",
    "UnauthorizedError",
    "ValidationError",
    "config",
]
