"""
Process configuration for the Cartoonify API.

Settings are read from the environment once at startup and passed to the
service, generator and storage layers.
"""
import os
from dataclasses import dataclass, field
from typing import List, Optional

from .cartoonify.clients.base import TargetSize

PROVIDERS = ("openai", "azure", "hf_space")
STORAGE_BACKENDS = ("azure", "local", "none")

DEFAULT_ALLOWED_ORIGINS = ["http://localhost:3000", "http://localhost:5173"]
DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024


def _split_list(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or value.strip() == "":
        return None
    return float(value)


@dataclass
class Settings:
    """Runtime configuration."""

    # Environment variable names
    ENV_PROVIDER = "CARTOONIFY_PROVIDER"
    ENV_OPENAI_API_KEY = "OPENAI_API_KEY"
    ENV_OPENAI_BASE_URL = "OPENAI_BASE_URL"
    ENV_OPENAI_MODEL = "OPENAI_IMAGE_MODEL"
    ENV_AZURE_ENDPOINT = "AZURE_OPENAI_ENDPOINT"
    ENV_AZURE_API_KEY = "AZURE_OPENAI_API_KEY"
    ENV_AZURE_MODEL = "AZURE_OPENAI_MODEL"
    ENV_HF_SPACE_URL = "HF_SPACE_CARTOON_URL"
    ENV_HF_UPSCALE_URL = "HF_SPACE_UPSCALE_URL"
    ENV_HF_TOKEN = "HF_TOKEN"
    ENV_STORAGE_BACKEND = "STORAGE_BACKEND"
    ENV_STORAGE_CONNECTION_STRING = "AZURE_STORAGE_CONNECTION_STRING"

    provider: str = "openai"
    openai_api_key: Optional[str] = None
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-image-1"
    azure_endpoint: Optional[str] = None
    azure_api_key: Optional[str] = None
    azure_model: str = "gpt-image-1"
    hf_space_url: Optional[str] = None
    hf_upscale_url: Optional[str] = None
    hf_token: Optional[str] = None

    storage_backend: str = "local"
    storage_connection_string: Optional[str] = None
    container_name: str = "cartoonify"
    local_storage_path: str = "local_storage"
    public_base_url: Optional[str] = None
    preview_folder: str = "cartoonify/previews_src"
    hd_folder: str = "cartoonify/generated_hd"
    health_folder: str = "cartoonify/healthcheck"

    preview_size: TargetSize = TargetSize.SMALL
    hd_size: TargetSize = TargetSize.LARGE
    allowed_origins: List[str] = field(default_factory=lambda: list(DEFAULT_ALLOWED_ORIGINS))
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    upstream_timeout: Optional[float] = None
    styles_file: Optional[str] = None
    default_style: Optional[str] = None
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    def __post_init__(self):
        self.provider = self.provider.lower()
        self.storage_backend = self.storage_backend.lower()
        if self.provider not in PROVIDERS:
            raise ValueError(f"Unknown provider: {self.provider}. Use one of {', '.join(PROVIDERS)}.")
        if self.storage_backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"Unknown storage backend: {self.storage_backend}. Use one of {', '.join(STORAGE_BACKENDS)}."
            )
        self.preview_size = TargetSize.parse(self.preview_size)
        self.hd_size = TargetSize.parse(self.hd_size)

    @classmethod
    def from_env(cls) -> "Settings":
        connection_string = os.getenv(cls.ENV_STORAGE_CONNECTION_STRING)
        default_backend = "azure" if connection_string else "local"

        return cls(
            provider=os.getenv(cls.ENV_PROVIDER, "openai"),
            openai_api_key=os.getenv(cls.ENV_OPENAI_API_KEY),
            openai_base_url=os.getenv(cls.ENV_OPENAI_BASE_URL, "https://api.openai.com/v1"),
            openai_model=os.getenv(cls.ENV_OPENAI_MODEL, "gpt-image-1"),
            azure_endpoint=os.getenv(cls.ENV_AZURE_ENDPOINT),
            azure_api_key=os.getenv(cls.ENV_AZURE_API_KEY),
            azure_model=os.getenv(cls.ENV_AZURE_MODEL, "gpt-image-1"),
            hf_space_url=os.getenv(cls.ENV_HF_SPACE_URL),
            hf_upscale_url=os.getenv(cls.ENV_HF_UPSCALE_URL),
            hf_token=os.getenv(cls.ENV_HF_TOKEN),
            storage_backend=os.getenv(cls.ENV_STORAGE_BACKEND, default_backend),
            storage_connection_string=connection_string,
            container_name=os.getenv("CONTAINER_NAME", "cartoonify"),
            local_storage_path=os.getenv("LOCAL_STORAGE_PATH", "local_storage"),
            public_base_url=os.getenv("PUBLIC_BASE_URL"),
            preview_folder=os.getenv("PREVIEW_FOLDER", "cartoonify/previews_src"),
            hd_folder=os.getenv("HD_FOLDER", "cartoonify/generated_hd"),
            health_folder=os.getenv("HEALTH_FOLDER", "cartoonify/healthcheck"),
            preview_size=os.getenv("PREVIEW_SIZE", "small"),
            hd_size=os.getenv("HD_SIZE", "large"),
            allowed_origins=_split_list(os.getenv("ALLOWED_ORIGINS")) or list(DEFAULT_ALLOWED_ORIGINS),
            max_body_bytes=int(os.getenv("MAX_BODY_BYTES", str(DEFAULT_MAX_BODY_BYTES))),
            upstream_timeout=_optional_float(os.getenv("UPSTREAM_TIMEOUT_SECONDS")),
            styles_file=os.getenv("STYLES_FILE"),
            default_style=os.getenv("DEFAULT_STYLE"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "8000")),
        )
