import base64
import binascii
from typing import Optional

from google.genai import types
from loguru import logger

from core.errors import UpstreamError, ValidationError
from core.genai import GenAIProvider
from models.studio import EnhanceRequest, ImageResponse

ENHANCE_INSTRUCTION = (
    "You are a world-class creative director specializing in high-fidelity generative art prompts. "
    "Take the user's brief text and expand it into a detailed, descriptive prompt suitable for a modern "
    "image generation AI, including style, lighting, composition, and mood. Keep it under 100 words. "
    "The output must be ONLY the descriptive scene."
)

ANALYZE_INSTRUCTION = (
    "Analyze this image. Describe its primary subject, style, color palette, and mood. "
    "Generate a high-quality, creative prompt of 50-70 words suitable for an image generation model "
    "to create similar variations. Output ONLY the generated prompt text."
)

VARIATION_TEMPLATE = "Create a stylized, artistic variation of the following image description, rendered as {style}: {analysis}"

NO_IMAGE_MESSAGE = "No image data returned from Gemini."
NO_TEXT_MESSAGE = "No text returned from Gemini."


def decode_image(base64_image: str) -> bytes:
    """Decode client-supplied base64, rejecting malformed input"""
    # Line-wrapped (MIME style) base64 is accepted
    compact = "".join(base64_image.split())
    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValidationError(f"Invalid base64 image data: {e}") from e


def extract_text(response: types.GenerateContentResponse) -> str:
    text = (response.text or "").strip()
    if not text:
        feedback = getattr(response, "prompt_feedback", None)
        block_reason = getattr(feedback, "block_reason", None)
        if block_reason:
            raise UpstreamError(f"Request blocked by Gemini: {block_reason}")
        raise UpstreamError(NO_TEXT_MESSAGE)
    return text


def extract_image(response: types.GenerateContentResponse) -> str:
    """Return the first inline image of the first candidate as base64"""
    candidates = response.candidates or []
    content = candidates[0].content if candidates else None
    parts = (content.parts if content else None) or []

    for part in parts:
        inline_data = part.inline_data
        if not inline_data or not inline_data.data:
            continue
        if inline_data.mime_type and not inline_data.mime_type.startswith("image/"):
            continue
        return base64.b64encode(inline_data.data).decode("ascii")

    raise UpstreamError(NO_IMAGE_MESSAGE)


def build_variation_prompt(image_analysis: str, style: str) -> str:
    return VARIATION_TEMPLATE.format(style=style, analysis=image_analysis)


class StudioService:
    def __init__(self, provider: GenAIProvider):
        self.provider = provider

    async def enhance_prompt(self, text_prompt: str) -> str:
        """Expand a short brief into a detailed image prompt"""
        model = self.provider.get_text_model()
        response = await model.generate_content([
            ENHANCE_INSTRUCTION,
            f'User brief: "{text_prompt}"',
        ])
        result = extract_text(response)
        logger.info("Prompt enhanced")
        return result

    async def analyze_image(self, base64_image: str, mime_type: str) -> str:
        """Describe an uploaded image as a prompt for similar variations"""
        image_bytes = decode_image(base64_image)
        model = self.provider.get_text_model()
        image_part = types.Part.from_bytes(data=image_bytes, mime_type=mime_type)
        response = await model.generate_content([
            ANALYZE_INSTRUCTION,
            image_part,
        ])
        result = extract_text(response)
        logger.info(f"Image analyzed ({mime_type})")
        return result

    async def enhance_or_analyze(self, request: EnhanceRequest) -> str:
        if request.type == "enhance" and request.text_prompt:
            return await self.enhance_prompt(request.text_prompt)
        if request.type == "analyze" and request.base64_image and request.mime_type:
            return await self.analyze_image(request.base64_image, request.mime_type)
        raise ValidationError("Invalid request type or missing parameters.")

    async def _generate(self, prompt: str) -> str:
        model = self.provider.get_image_model()
        response = await model.generate_content(prompt)
        return extract_image(response)

    async def generate_image(self, approved_prompt: Optional[str]) -> ImageResponse:
        """Generate an image from the user-approved prompt"""
        if not approved_prompt:
            raise ValidationError("Approved prompt is required.")

        image = await self._generate(approved_prompt)
        logger.info("Image generated")
        return ImageResponse(
            status="Image generated successfully",
            final_prompt=approved_prompt,
            image=image,
        )

    async def generate_variation(self, image_analysis: Optional[str]) -> ImageResponse:
        """Generate a stylized variation from an image analysis"""
        if not image_analysis:
            raise ValidationError("Image analysis description is required.")

        variation_prompt = build_variation_prompt(image_analysis, self.provider.settings.VARIATION_STYLE)
        image = await self._generate(variation_prompt)
        logger.info("Variation generated")
        return ImageResponse(
            status="Variation generated successfully",
            final_prompt=variation_prompt,
            image=image,
        )
