"""Nano Studio - a small gallery client for Gemini image generation."""

__version__ = "0.1.0"

from nanostudio.core.config import StudioConfig, config
from nanostudio.core.models import GeneratedImage, GenerationRequest, ModelId, ReferenceImage
from nanostudio.core.orchestrator import GenerationOrchestrator

__all__ = [
    "GeneratedImage",
    "GenerationOrchestrator",
    "GenerationRequest",
    "ModelId",
    "ReferenceImage",
    "StudioConfig",
    "config",
]
