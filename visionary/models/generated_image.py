import base64
from dataclasses import dataclass, field
from datetime import datetime, timezone

from visionary.schemas.generation import AspectRatio

DEFAULT_MIME_TYPE = "image/png"


@dataclass(frozen=True)
class ImagePayload:
    """Encoded image exactly as the provider returned it."""
    data: str
    mime_type: str = DEFAULT_MIME_TYPE

    @property
    def data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"

    def to_bytes(self) -> bytes:
        """Decode the base64 payload to raw image bytes."""
        return base64.b64decode(self.data)


@dataclass(frozen=True)
class GeneratedImage:
    id: str
    image_data: ImagePayload
    prompt: str
    aspect_ratio: AspectRatio
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __repr__(self) -> str:
        return f"<GeneratedImage(id={self.id}, aspect_ratio={self.aspect_ratio.value})>"
