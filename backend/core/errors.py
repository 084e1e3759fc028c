"""
Error taxonomy for the studio relay.

Every error carries the HTTP status it maps to. Handlers raise these and the
application turns them into ``{"error": message}`` bodies.
"""


class StudioError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code: int = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(StudioError):
    """A required setting (the provider API key) is missing."""

    status_code = 500


class ValidationError(StudioError):
    """The request body is missing fields or carries invalid values."""

    status_code = 400


class UpstreamError(StudioError):
    """The Gemini call failed or returned nothing usable."""

    status_code = 500

    DEFAULT_MESSAGE = "AI service failed to process the request."

    @classmethod
    def from_exception(cls, error: Exception) -> "UpstreamError":
        return cls(str(error) or cls.DEFAULT_MESSAGE)
