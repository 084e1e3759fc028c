from fastapi import APIRouter, Depends, Request
from loguru import logger

from core.errors import StudioError, UpstreamError
from core.genai import GenAIProvider
from models.studio import (
    EnhanceRequest,
    EnhanceResponse,
    ErrorResponse,
    HealthResponse,
    ImageGenRequest,
    ImageResponse,
    VariationRequest,
)
from services.studio_service import StudioService

router = APIRouter(tags=["studio"])

ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}

def get_genai_provider(request: Request) -> GenAIProvider:
    return request.app.state.genai_provider

def get_studio_service(provider: GenAIProvider = Depends(get_genai_provider)) -> StudioService:
    return StudioService(provider)

@router.get("/health-check", response_model=HealthResponse)
async def health_check(provider: GenAIProvider = Depends(get_genai_provider)):
    """Report whether the Gemini API key is configured"""
    return HealthResponse(key_set=provider.key_set)

@router.post("/enhance-and-analyze", response_model=EnhanceResponse, responses=ERROR_RESPONSES)
async def enhance_and_analyze(
    enhance_request: EnhanceRequest,
    studio_service: StudioService = Depends(get_studio_service),
):
    """Enhance a text prompt or analyze an uploaded image"""
    try:
        result = await studio_service.enhance_or_analyze(enhance_request)
        return EnhanceResponse(result=result)
    except StudioError as e:
        logger.error(f"Gemini API Error: {e.message}")
        raise
    except Exception as e:
        logger.error(f"Gemini API Error: {str(e)}")
        raise UpstreamError.from_exception(e) from e

@router.post("/generate-image", response_model=ImageResponse, responses=ERROR_RESPONSES)
async def generate_image(
    image_request: ImageGenRequest,
    studio_service: StudioService = Depends(get_studio_service),
):
    """Generate an image from an approved prompt"""
    try:
        return await studio_service.generate_image(image_request.approved_prompt)
    except StudioError as e:
        logger.error(f"Gemini Image Gen Error: {e.message}")
        raise
    except Exception as e:
        logger.error(f"Gemini Image Gen Error: {str(e)}")
        raise UpstreamError.from_exception(e) from e

@router.post("/generate-variation", response_model=ImageResponse, responses=ERROR_RESPONSES)
async def generate_variation(
    variation_request: VariationRequest,
    studio_service: StudioService = Depends(get_studio_service),
):
    """Generate a stylized variation from an image analysis"""
    try:
        return await studio_service.generate_variation(variation_request.image_analysis)
    except StudioError as e:
        logger.error(f"Gemini Variation Error: {e.message}")
        raise
    except Exception as e:
        logger.error(f"Gemini Variation Error: {str(e)}")
        raise UpstreamError.from_exception(e) from e
