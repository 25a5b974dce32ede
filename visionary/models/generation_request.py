from dataclasses import dataclass

from visionary.errors import ValidationError
from visionary.schemas.generation import AspectRatio


@dataclass(frozen=True)
class GenerationRequest:
    """A single submission: trimmed prompt plus the requested aspect ratio."""
    prompt: str
    aspect_ratio: AspectRatio = AspectRatio.SQUARE

    @classmethod
    def create(
        cls,
        prompt: str | None,
        aspect_ratio: AspectRatio | str | None = None,
    ) -> "GenerationRequest":
        """
        Build a request from raw user input.

        Raises:
            ValidationError: if the prompt is empty after trimming
            ValueError: if the aspect ratio is not one of the supported values
        """
        text = (prompt or "").strip()
        if not text:
            raise ValidationError("Prompt must not be empty")
        ratio = AspectRatio(aspect_ratio) if aspect_ratio else AspectRatio.SQUARE
        return cls(prompt=text, aspect_ratio=ratio)
