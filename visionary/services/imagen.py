import httpx

from visionary.config import get_settings
from visionary.errors import ConfigurationError, EmptyResponseError, RequestError
from visionary.models import GenerationRequest, ImagePayload
from visionary.models.generated_image import DEFAULT_MIME_TYPE
from visionary.services.base import ImageGenerationClient
from visionary.utils.logger import get_logger

logger = get_logger("services.imagen")


class NanoBananaService(ImageGenerationClient):
    """
    Service for generating images using Google's Nano Banana (Gemini Image Generation) API.

    Sends a single text prompt with the requested aspect ratio and returns the
    first inline image of the first candidate, untouched.
    """

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        # The credential is resolved lazily, on the first generate() call
        self._api_key = api_key
        self.model = model or settings.gemini_model
        self.base_url = (base_url or settings.gemini_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._transport = transport

    def _resolve_api_key(self) -> str:
        if self._api_key is None:
            self._api_key = get_settings().gemini_api_key
        if not self._api_key:
            raise ConfigurationError("GEMINI_API_KEY is not set")
        return self._api_key

    def _build_payload(self, request: GenerationRequest) -> dict:
        return {
            "contents": [
                {
                    "parts": [
                        {"text": request.prompt}
                    ]
                }
            ],
            "generationConfig": {
                "responseModalities": ["TEXT", "IMAGE"],
                "imageConfig": {
                    "aspectRatio": request.aspect_ratio.value,
                },
            }
        }

    def _extract_image(self, result: object) -> ImagePayload:
        """Return the first inline image part of the first candidate."""
        if not isinstance(result, dict):
            raise RequestError("Nano Banana API returned a malformed response")

        candidates = result.get("candidates") or []
        if not isinstance(candidates, list):
            raise RequestError("Nano Banana API returned malformed candidates")
        if not candidates:
            feedback = result.get("promptFeedback")
            reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
            raise EmptyResponseError(
                f"No candidates returned from the model (block reason: {reason})"
            )

        candidate = candidates[0]
        content = candidate.get("content") if isinstance(candidate, dict) else None
        parts = (content.get("parts") if isinstance(content, dict) else None) or []
        if not isinstance(candidate, dict) or not isinstance(parts, list):
            raise RequestError("Nano Banana API returned a malformed candidate")

        texts = []
        for part in parts:
            if not isinstance(part, dict):
                raise RequestError("Nano Banana API returned a malformed content part")
            inline_data = part.get("inlineData")
            if isinstance(inline_data, dict) and inline_data.get("data"):
                return ImagePayload(
                    data=inline_data["data"],
                    mime_type=inline_data.get("mimeType") or DEFAULT_MIME_TYPE,
                )
            if isinstance(part.get("text"), str):
                texts.append(part["text"])

        text = " ".join(texts)
        raise EmptyResponseError(f"No image data returned from the model: {text[:200]}")

    async def generate(self, request: GenerationRequest) -> ImagePayload:
        """
        Generate an image from a text prompt.

        Raises:
            ConfigurationError: the API key is missing, no call is made
            RequestError: the call failed, timed out or was rejected
            EmptyResponseError: the response carried no image
        """
        api_key = self._resolve_api_key()
        url = f"{self.base_url}/{self.model}:generateContent"

        logger.info(
            "Requesting image from %s (aspect_ratio=%s)", self.model, request.aspect_ratio.value
        )
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(
                    url,
                    json=self._build_payload(request),
                    headers={
                        "Content-Type": "application/json",
                        "x-goog-api-key": api_key,
                    }
                )
        except httpx.TimeoutException as e:
            raise RequestError(f"Nano Banana API timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise RequestError(f"Nano Banana API request failed: {e}") from e

        if response.status_code != 200:
            raise RequestError(f"Nano Banana API error ({response.status_code}): {response.text}")

        try:
            result = response.json()
        except ValueError as e:
            raise RequestError("Nano Banana API returned a malformed response") from e

        return self._extract_image(result)


# Singleton instance
imagen_service = NanoBananaService()
