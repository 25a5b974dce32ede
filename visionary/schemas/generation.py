from pydantic import BaseModel, Field
from datetime import datetime
from enum import Enum


class AspectRatio(str, Enum):
    SQUARE = "1:1"
    PORTRAIT_3_4 = "3:4"
    LANDSCAPE_4_3 = "4:3"
    PORTRAIT_9_16 = "9:16"
    LANDSCAPE_16_9 = "16:9"


class SessionState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class GenerateImageRequest(BaseModel):
    """Request to start a generation. Fields left out fall back to the session input."""
    prompt: str | None = Field(
        default=None,
        max_length=2000,
        description="Description of the image (e.g., 'a red fox in the snow'). Uses the current prompt input when omitted."
    )
    aspect_ratio: AspectRatio | None = Field(
        default=None,
        description="Aspect ratio of the generated image. Uses the selected ratio when omitted."
    )


class UpdatePromptRequest(BaseModel):
    """Edit the uncommitted prompt input and/or the selected aspect ratio."""
    prompt: str | None = Field(default=None, max_length=2000)
    aspect_ratio: AspectRatio | None = None


class GeneratedImageInfo(BaseModel):
    """Info about a single gallery entry."""
    id: str
    prompt: str
    aspect_ratio: AspectRatio
    created_at: datetime
    mime_type: str
    image_url: str = Field(..., description="The image as a data URI")


class SessionInfo(BaseModel):
    """Current state of the generation session."""
    state: SessionState
    is_generating: bool
    status: str | None = None
    error: str | None = None
    prompt: str
    aspect_ratio: AspectRatio
    gallery_size: int


class GenerateImageResponse(BaseModel):
    """Outcome of a submission."""
    accepted: bool
    session: SessionInfo
    message: str


class SurprisePromptResponse(BaseModel):
    prompt: str
