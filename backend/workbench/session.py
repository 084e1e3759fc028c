"""
Client-side state for the two studio workflows.

1. Text -> Enhance -> Approve -> Image
2. Image -> Analysis -> Variation

A session mirrors what the browser UI keeps in component state: the prompt
texts, the approval flag, uploaded and returned images, a status line and a
loading flag. Each workflow step is one backend call.
"""

import base64
import mimetypes
from pathlib import Path
from typing import Optional

from loguru import logger

from workbench.api_client import StudioAPIClient, StudioAPIError

DATA_URI_PREFIX = "data:image/png;base64,"


class WorkflowError(Exception):
    """A step was attempted before its prerequisites were met."""


class StudioSession:
    def __init__(self, api: StudioAPIClient):
        self.api = api

        self.text_prompt: str = ""
        self.enhanced_prompt: str = ""
        self.approved_prompt: str = ""
        self.is_prompt_approved: bool = False
        self.generated_image: str = ""

        self.uploaded_image: Optional[bytes] = None
        self.uploaded_mime_type: Optional[str] = None
        self.image_analysis: str = ""
        self.variation_image: str = ""

        self.status: str = "Ready"
        self.loading: bool = False

    def _fail(self, prefix: str, error: StudioAPIError) -> None:
        logger.error(f"{prefix}{error}")
        self.status = f"{prefix}{error}"

    # Workflow 1

    async def enhance_prompt(self) -> None:
        self.status = "Enhancing prompt..."
        self.enhanced_prompt = ""
        self.approved_prompt = ""
        self.is_prompt_approved = False
        self.loading = True
        try:
            data = await self.api.post("enhance-and-analyze", {
                "type": "enhance",
                "textPrompt": self.text_prompt,
            })
            self.enhanced_prompt = data["result"]
            self.approved_prompt = data["result"]
            self.status = "Prompt enhanced. Review & approve."
        except StudioAPIError as e:
            self._fail("Error: ", e)
        finally:
            self.loading = False

    def edit_approved_prompt(self, text: str) -> None:
        self.approved_prompt = text
        self.is_prompt_approved = False

    def approve_prompt(self) -> None:
        if not self.approved_prompt:
            raise WorkflowError("Enhance a prompt before approving it.")
        self.is_prompt_approved = True
        self.status = "Prompt approved. Ready to generate image."

    async def generate_image(self) -> None:
        if not self.approved_prompt or not self.is_prompt_approved:
            raise WorkflowError("Please approve the prompt before generating image.")
        self.status = "Generating image..."
        self.generated_image = ""
        self.loading = True
        try:
            data = await self.api.post("generate-image", {"approvedPrompt": self.approved_prompt})
            self.generated_image = f"{DATA_URI_PREFIX}{data['image']}"
            self.status = "Image generation complete!"
        except StudioAPIError as e:
            self._fail("Error generating image: ", e)
        finally:
            self.loading = False

    # Workflow 2

    def upload_image(self, data: Optional[bytes], mime_type: Optional[str] = None) -> None:
        self.uploaded_image = data
        self.uploaded_mime_type = mime_type if data is not None else None
        self.image_analysis = ""
        self.variation_image = ""
        self.generated_image = ""
        self.status = "Image uploaded" if data is not None else "No image selected"

    def upload_image_file(self, path: Path) -> None:
        path = Path(path)
        mime_type, _ = mimetypes.guess_type(path.name)
        if not mime_type or not mime_type.startswith("image/"):
            raise WorkflowError(f"Not an image file: {path.name}")
        self.upload_image(path.read_bytes(), mime_type)

    async def analyze_image(self) -> None:
        if self.uploaded_image is None:
            raise WorkflowError("Upload an image first")
        self.status = "Analyzing image..."
        self.image_analysis = ""
        self.loading = True
        try:
            data = await self.api.post("enhance-and-analyze", {
                "type": "analyze",
                "base64Image": base64.b64encode(self.uploaded_image).decode("ascii"),
                "mimeType": self.uploaded_mime_type,
            })
            self.image_analysis = data["result"]
            self.status = "Analysis complete. Ready for variation."
        except StudioAPIError as e:
            self._fail("Error analyzing image: ", e)
        finally:
            self.loading = False

    async def generate_variation(self) -> None:
        if not self.image_analysis:
            raise WorkflowError("Analyze image first")
        self.status = "Generating variation..."
        self.variation_image = ""
        self.loading = True
        try:
            data = await self.api.post("generate-variation", {"imageAnalysis": self.image_analysis})
            self.variation_image = f"{DATA_URI_PREFIX}{data['image']}"
            self.status = "Variation generation complete!"
        except StudioAPIError as e:
            self._fail("Error generating variation: ", e)
        finally:
            self.loading = False


def data_uri_to_bytes(data_uri: str) -> bytes:
    """Strip the data URI header and decode the image payload"""
    return base64.b64decode(data_uri.split(",", 1)[-1])
