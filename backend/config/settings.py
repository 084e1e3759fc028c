from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    # API Settings
    API_V1_STR: str = "/api"
    PROJECT_NAME: str = "Gemini Studio"
    VERSION: str = "1.0.0"

    # Server Settings
    HOST: str = "127.0.0.1"
    PORT: int = 8000

    # External APIs
    GEMINI_API_KEY: Optional[str] = None

    # Models
    TEXT_MODEL: str = "gemini-2.5-flash"
    IMAGE_MODEL: str = "gemini-2.5-flash-image-preview"

    # Content policy applied to every harm category of the text model
    SAFETY_THRESHOLD: str = "BLOCK_NONE"

    # Style phrase used when building variation prompts
    VARIATION_STYLE: str = "a cinematic digital painting with neon lighting and deep shadow"

    # Upload Limits
    MAX_BODY_BYTES: int = 50 * 1024 * 1024  # 50MB

    # CORS Settings
    FRONT_END_ORIGIN: str = "http://localhost:5173"

    @property
    def key_set(self) -> bool:
        return bool(self.GEMINI_API_KEY)
