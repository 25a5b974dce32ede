"""
Error types raised by the generation client and the session controller.

Every provider failure carries a ``user_message`` that is safe to show in
the error banner; the exception text itself is kept for logs.
"""

GENERIC_FAILURE_MESSAGE = "Failed to generate image. Please try again."


class ValidationError(ValueError):
    """The prompt is empty after trimming. Submitting it is a no-op."""


class ProviderError(Exception):
    """Base class for failures of the remote image-generation provider."""

    user_message: str = GENERIC_FAILURE_MESSAGE


class ConfigurationError(ProviderError):
    """The provider credential is missing. Not retried."""

    user_message = "Image generation is not configured. Set GEMINI_API_KEY and restart."


class RequestError(ProviderError):
    """The remote call failed, timed out, or was rejected."""


class EmptyResponseError(ProviderError):
    """The provider answered but returned no image."""

    user_message = "No image was returned. Please try a different prompt."
