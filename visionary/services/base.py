from abc import ABC, abstractmethod

from visionary.models import GenerationRequest, ImagePayload


class ImageGenerationClient(ABC):
    """Abstract interface for an image generation client.

    Implementations issue one provider call per request and raise a
    :class:`visionary.errors.ProviderError` subclass on failure.
    """

    @abstractmethod
    async def generate(self, request: GenerationRequest) -> ImagePayload:
        """Generate an image for the request."""
