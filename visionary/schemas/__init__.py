from visionary.schemas.generation import (
    AspectRatio,
    SessionState,
    GenerateImageRequest,
    UpdatePromptRequest,
    GeneratedImageInfo,
    SessionInfo,
    GenerateImageResponse,
    SurprisePromptResponse,
)

__all__ = [
    "AspectRatio",
    "SessionState",
    "GenerateImageRequest",
    "UpdatePromptRequest",
    "GeneratedImageInfo",
    "SessionInfo",
    "GenerateImageResponse",
    "SurprisePromptResponse",
]
