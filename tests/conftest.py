"""Shared pytest fixtures for Nano Studio tests."""

import base64
import io
import shutil
import tempfile
from pathlib import Path
from typing import Generator

import pytest
from PIL import Image

from nanostudio.core.config import StudioConfig
from nanostudio.core.errors import StudioError
from nanostudio.core.generator import ImageGenerator
from nanostudio.core.image_store import InMemoryImageStore
from nanostudio.core.models import GeneratedImage, GenerationRequest
from nanostudio.core.orchestrator import GenerationOrchestrator
from nanostudio.ui.state import StudioSession


class FakeGenerator(ImageGenerator):
    """Generator returning canned data URLs and recording every call.

    Args:
        urls: Data URLs to return from each call.
        error: If set, raised instead of returning.
    """

    name = "fake"

    def __init__(self, urls: list[str] | None = None, error: StudioError | None = None):
        self.urls = list(urls or [])
        self.error = error
        self.calls: list[GenerationRequest] = []

    async def generate_images(self, request: GenerationRequest) -> list[str]:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        return list(self.urls)


def make_png_base64(color: str = "red", size: tuple[int, int] = (2, 2)) -> str:
    """Encode a tiny solid-colour PNG as base64 text."""
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format="PNG")
    return base64.b64encode(buffer.getvalue()).decode("ascii")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files.

    Yields:
        Path to temporary directory

    Cleanup:
        Directory is removed after test completes
    """
    temp_path = Path(tempfile.mkdtemp())
    try:
        yield temp_path
    finally:
        shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def test_config(temp_dir: Path) -> StudioConfig:
    """Create a test configuration with temporary directories.

    Args:
        temp_dir: Temporary directory from fixture

    Returns:
        StudioConfig instance for testing
    """
    return StudioConfig(
        gemini_api_key="test-key",
        api_base_url="https://gemini.test/v1beta",
        access_secret=None,
        server_url=None,
        data_dir=temp_dir / "data",
        outputs_dir=temp_dir / "outputs",
        _env_file=None,
    )


@pytest.fixture
def png_base64() -> str:
    """Base64 text of a valid 2x2 PNG."""
    return make_png_base64()


@pytest.fixture
def png_data_url(png_base64: str) -> str:
    return f"data:image/png;base64,{png_base64}"


@pytest.fixture
def fake_generator(png_data_url: str) -> FakeGenerator:
    """Generator that returns a single PNG."""
    return FakeGenerator([png_data_url])


@pytest.fixture
def memory_store() -> InMemoryImageStore:
    return InMemoryImageStore()


@pytest.fixture
def orchestrator(fake_generator: FakeGenerator, memory_store: InMemoryImageStore):
    """Orchestrator wired to the fake generator and an in-memory store."""
    return GenerationOrchestrator(fake_generator, memory_store)


@pytest.fixture
def session(orchestrator: GenerationOrchestrator, test_config: StudioConfig) -> StudioSession:
    """UI session in direct mode (no access code)."""
    return StudioSession(orchestrator=orchestrator, settings=test_config)


@pytest.fixture
def sample_image(png_data_url: str) -> GeneratedImage:
    return GeneratedImage(
        id="img-1",
        url=png_data_url,
        prompt="a red cat",
        model="Nano",
        timestamp=1_700_000_000_000,
    )
