"""
Shared pytest fixtures and configuration for all tests
"""
import pytest
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

# Add backend to Python path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from google.genai import types  # noqa: E402

PNG_BYTES = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR-fake-image-bytes"


def build_text_response(text):
    """A GenerateContentResponse whose only part is text"""
    return types.GenerateContentResponse(candidates=[
        types.Candidate(content=types.Content(role="model", parts=[types.Part(text=text)]))
    ])


def build_image_response(data=PNG_BYTES, mime_type="image/png", leading_text=None):
    """A GenerateContentResponse carrying one inline image part"""
    parts = []
    if leading_text:
        parts.append(types.Part(text=leading_text))
    parts.append(types.Part(inline_data=types.Blob(data=data, mime_type=mime_type)))
    return types.GenerateContentResponse(candidates=[
        types.Candidate(content=types.Content(role="model", parts=parts))
    ])


@pytest.fixture
def make_text_response():
    return build_text_response


@pytest.fixture
def make_image_response():
    return build_image_response


@pytest.fixture
def png_bytes():
    return PNG_BYTES


@pytest.fixture
def settings():
    """Settings with a fake key, isolated from any local .env file"""
    from config.settings import Settings
    return Settings(_env_file=None, GEMINI_API_KEY="test-key")


@pytest.fixture
def text_model():
    """Mocked multimodal text model"""
    model = MagicMock()
    model.generate_content = AsyncMock(return_value=build_text_response("A castle at dusk."))
    return model


@pytest.fixture
def image_model():
    """Mocked text-to-image model"""
    model = MagicMock()
    model.generate_content = AsyncMock(return_value=build_image_response())
    return model


@pytest.fixture
def provider(settings, text_model, image_model):
    """GenAIProvider whose model handles are mocks"""
    from core.genai import GenAIProvider
    provider = GenAIProvider(settings)
    provider.get_text_model = MagicMock(return_value=text_model)
    provider.get_image_model = MagicMock(return_value=image_model)
    return provider


@pytest.fixture
def studio_service(provider):
    from services.studio_service import StudioService
    return StudioService(provider)


@pytest.fixture
def app(settings, provider):
    """FastAPI app wired to the mocked provider"""
    from main import create_app
    app = create_app(settings)
    app.state.genai_provider = provider
    return app


@pytest.fixture
def client(app):
    """Provide FastAPI test client"""
    from fastapi.testclient import TestClient
    return TestClient(app)
