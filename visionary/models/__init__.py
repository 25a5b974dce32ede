from visionary.models.generation_request import GenerationRequest
from visionary.models.generated_image import GeneratedImage, ImagePayload

__all__ = ["GenerationRequest", "GeneratedImage", "ImagePayload"]
