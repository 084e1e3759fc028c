"""
Gemini client provider.

Holds the API key and hands out a single ``google.genai`` client plus two
model handles: a multimodal text/vision model and a text-to-image model.
Both the client and the handles are built on first use and cached for the
lifetime of the provider, which is created once with the application.
"""

from typing import Any, List, Optional

from google import genai
from google.genai import types

from config.settings import Settings
from core.errors import ConfigurationError

HARM_CATEGORIES = [
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
]

IMAGE_RESPONSE_MODALITIES = [types.Modality.TEXT, types.Modality.IMAGE]


def build_safety_settings(threshold: str) -> List[types.SafetySetting]:
    """Apply one block threshold to every harm category"""
    name = threshold.upper()
    if name not in types.HarmBlockThreshold.__members__:
        raise ConfigurationError(f"Unknown safety threshold: {threshold}")
    block_threshold = types.HarmBlockThreshold[name]

    return [
        types.SafetySetting(category=category, threshold=block_threshold)
        for category in HARM_CATEGORIES
    ]


class GeminiModel:
    """A model name bound to a client and a fixed generation config."""

    def __init__(self, client: genai.Client, model: str, config: Optional[types.GenerateContentConfig] = None):
        self.client = client
        self.model = model
        self.config = config

    async def generate_content(self, contents: Any) -> types.GenerateContentResponse:
        return await self.client.aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=self.config,
        )


class GenAIProvider:
    def __init__(self, settings: Settings):
        self.settings = settings
        self._client: Optional[genai.Client] = None
        self._text_model: Optional[GeminiModel] = None
        self._image_model: Optional[GeminiModel] = None

    @property
    def key_set(self) -> bool:
        return self.settings.key_set

    def get_client(self) -> genai.Client:
        if not self.settings.GEMINI_API_KEY:
            raise ConfigurationError("GEMINI_API_KEY environment variable is not set or accessible.")
        if self._client is None:
            self._client = genai.Client(api_key=self.settings.GEMINI_API_KEY)
        return self._client

    def get_text_model(self) -> GeminiModel:
        if self._text_model is None:
            config = types.GenerateContentConfig(
                safety_settings=build_safety_settings(self.settings.SAFETY_THRESHOLD),
            )
            self._text_model = GeminiModel(self.get_client(), self.settings.TEXT_MODEL, config)
        return self._text_model

    def get_image_model(self) -> GeminiModel:
        if self._image_model is None:
            config = types.GenerateContentConfig(
                response_modalities=IMAGE_RESPONSE_MODALITIES,
            )
            self._image_model = GeminiModel(self.get_client(), self.settings.IMAGE_MODEL, config)
        return self._image_model
