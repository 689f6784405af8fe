"""Shared pytest fixtures for cartoonify tests."""

import base64
from typing import List, Optional
from unittest.mock import Mock

import pytest

from app.config import Settings
from app.cartoonify.clients import BaseGenerator, GenerationRequest, GeneratorResult
from app.cartoonify.persistence import PersistenceAdapter
from app.cartoonify.service import CartoonifyService
from app.cartoonify.styles import StyleCatalog

PNG_1X1_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNkYPhfDwAChwGA60e6kgAAAABJRU5ErkJggg=="
PNG_1X1 = base64.b64decode(PNG_1X1_B64)
PNG_DATA_URL = f"data:image/png;base64,{PNG_1X1_B64}"

# Stand-in for a generated image
GENERATED = b"\x89PNG\r\n\x1a\ngenerated-image"

ALLOWED_ORIGINS = ["https://mora2.com", "http://localhost:3000"]


class FakeGenerator(BaseGenerator):
    """Generator returning a canned result and recording every request."""

    name = "fake"

    def __init__(self, result: Optional[GeneratorResult] = None, missing: Optional[List[str]] = None):
        super().__init__()
        self.result = result or GeneratorResult(data=GENERATED, status_code=200)
        self.missing = missing or []
        self.requests: List[GenerationRequest] = []

    def get_missing_config(self) -> list:
        return self.missing

    def generate(self, request: GenerationRequest) -> GeneratorResult:
        self.requests.append(request)
        return self.result


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings with local storage under a temp dir."""
    return Settings(
        provider="openai",
        openai_api_key="test-key",
        storage_backend="local",
        local_storage_path=str(tmp_path / "storage"),
        public_base_url="https://cdn.example.com",
        allowed_origins=list(ALLOWED_ORIGINS),
    )


@pytest.fixture
def styles() -> StyleCatalog:
    return StyleCatalog.load()


@pytest.fixture
def fake_generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def mock_storage():
    """Mock StorageService that accepts every upload."""
    mock = Mock()
    mock.enabled = True
    mock.mode = "MOCK"
    mock.upload_file = Mock(side_effect=lambda key, data, content_type: f"https://blob.example.com/{key}")
    mock.get_file = Mock(return_value=None)
    return mock


@pytest.fixture
def fake_fetch():
    """Remote fetch stub that must not be reached unless a test sets it up."""
    return Mock(side_effect=AssertionError("unexpected remote fetch"))


@pytest.fixture
def service(settings, fake_generator, mock_storage, styles, fake_fetch) -> CartoonifyService:
    return CartoonifyService(
        settings,
        generator=fake_generator,
        persistence=PersistenceAdapter(mock_storage),
        styles=styles,
        fetch=fake_fetch,
    )
