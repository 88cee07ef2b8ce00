"""Configuration management for Nano Studio.

All configuration is loaded with Pydantic Settings from environment
variables carrying the ``NANOSTUDIO_`` prefix, with fallback to a ``.env``
file and then to the defaults below.

Example .env file::

    NANOSTUDIO_GEMINI_API_KEY=your-key
    NANOSTUDIO_ACCESS_SECRET=let-me-in
    NANOSTUDIO_DATA_DIR=data

The API key may also be supplied as plain ``GEMINI_API_KEY``, which is the
name most Gemini tooling uses.

Usage::

    from nanostudio.core.config import config

    print(config.api_base_url)
    print(config.gallery_db)

A global ``config`` instance is created at import time; components also
accept an explicit :class:`StudioConfig` so tests can point them at
temporary directories.
"""

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StudioConfig(BaseSettings):
    """Main configuration for Nano Studio.

    Attributes
    ----------
    Remote API:
        gemini_api_key : str | None
            Key for the Gemini API.  Required for direct generation and on
            the server; unused when the UI talks to a server.
        api_base_url : str
            Base URL of the Gemini REST API (override for proxies).
        request_timeout : float
            Seconds to wait for a single generation call.

    Access gate:
        access_secret : str | None
            Shared secret the server requires on every generation call.
            Unset or empty disables the gate.

    Client:
        server_url : str | None
            When set, the UI sends generation calls to this Nano Studio
            server instead of calling Gemini directly.

    Paths:
        data_dir : Path
            Holds the gallery database and the cached access code.
        outputs_dir : Path
            Destination for exported images.

    Server and UI:
        server_host, server_port : uvicorn bind address for the API server.
        gradio_server_name, gradio_server_port, gradio_share : Gradio launch options.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NANOSTUDIO_",
        case_sensitive=False,
        extra="ignore",
    )

    # Remote API
    gemini_api_key: str | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "gemini_api_key", "NANOSTUDIO_GEMINI_API_KEY", "GEMINI_API_KEY"
        ),
        description="Gemini API key",
    )
    api_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Base URL of the Gemini REST API",
    )
    request_timeout: float = Field(
        default=120.0,
        description="Timeout in seconds for one generation call",
        gt=0,
    )

    # Access gate
    access_secret: str | None = Field(
        default=None,
        description="Shared secret required by the server (unset disables the gate)",
    )

    # Client routing
    server_url: str | None = Field(
        default=None,
        description="Nano Studio server to route UI generation calls through",
    )

    # Paths
    data_dir: Path = Field(
        default=Path("data"),
        description="Directory for the gallery database and cached access code",
    )
    outputs_dir: Path = Field(
        default=Path("outputs"),
        description="Directory to export images to",
    )

    # API server
    server_host: str = Field(default="0.0.0.0", description="API server bind address")
    server_port: int = Field(default=8787, ge=1024, le=65535, description="API server port")

    # UI settings
    gradio_server_name: str = Field(
        default="0.0.0.0",
        description="Gradio bind address (0.0.0.0 for local network)",
    )
    gradio_server_port: int = Field(default=7860, ge=1024, le=65535, description="Gradio port")
    gradio_share: bool = Field(
        default=False,
        description="Create public gradio.live link (keep False for local-only)",
    )

    def __init__(self, **kwargs):
        """Initialize configuration and create required directories."""
        super().__init__(**kwargs)

        self.data_dir.mkdir(parents=True, exist_ok=True)
        self.outputs_dir.mkdir(parents=True, exist_ok=True)

    @property
    def gallery_db(self) -> Path:
        """SQLite file backing the local image store."""
        return self.data_dir / "gallery.db"

    @property
    def credential_file(self) -> Path:
        """File the UI caches the server access code in."""
        return self.data_dir / "access_code"

    @property
    def gate_enabled(self) -> bool:
        return bool(self.access_secret)


# Global configuration instance, loaded from NANOSTUDIO_* variables and .env.
config = StudioConfig()
