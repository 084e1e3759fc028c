from pydantic import BaseModel, ConfigDict, Field
from typing import Optional

class StudioModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

class EnhanceRequest(StudioModel):
    type: Optional[str] = None  # "enhance" or "analyze"
    text_prompt: Optional[str] = Field(None, alias="textPrompt")
    base64_image: Optional[str] = Field(None, alias="base64Image")  # Raw base64, no data URI prefix
    mime_type: Optional[str] = Field(None, alias="mimeType")

class EnhanceResponse(StudioModel):
    result: str

class ImageGenRequest(StudioModel):
    approved_prompt: Optional[str] = Field(None, alias="approvedPrompt")

class VariationRequest(StudioModel):
    image_analysis: Optional[str] = Field(None, alias="imageAnalysis")

class ImageResponse(StudioModel):
    status: str
    final_prompt: str = Field(..., alias="finalPrompt")
    image: str  # Raw base64

class HealthResponse(StudioModel):
    key_set: bool = Field(..., alias="keySet")

class ErrorResponse(StudioModel):
    error: str
