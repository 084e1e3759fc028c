import os
from typing import Any, Dict, Optional

import httpx

DEFAULT_API_URL = "http://localhost:8000/api"


class StudioAPIError(Exception):
    """A backend call failed; the message is what the user should see."""


class StudioAPIClient:
    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: float = 120.0):
        self.base_url = (base_url or os.getenv("STUDIO_API_URL", DEFAULT_API_URL)).rstrip("/")
        self._client = httpx.AsyncClient(transport=transport, timeout=timeout)

    async def __aenter__(self) -> "StudioAPIClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """POST a JSON payload and return the decoded body, raising StudioAPIError on failure"""
        try:
            response = await self._client.post(
                f"{self.base_url}/{endpoint}",
                json=payload,
                headers={"Content-Type": "application/json"},
            )
        except httpx.HTTPError as e:
            raise StudioAPIError(str(e) or e.__class__.__name__) from e

        if response.is_error:
            raise StudioAPIError(self._error_message(response))
        return response.json()

    async def health_check(self) -> bool:
        try:
            response = await self._client.get(f"{self.base_url}/health-check")
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise StudioAPIError(str(e) or e.__class__.__name__) from e
        return bool(response.json().get("keySet"))

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            error = response.json().get("error")
        except ValueError:
            error = None
        return error or f"Request failed with status code {response.status_code}"
