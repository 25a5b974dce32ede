import aiofiles
from pathlib import Path

from visionary.config import get_settings
from visionary.models import GeneratedImage

FILENAME_PREFIX = "visionary"
PROMPT_PREFIX_LENGTH = 20

EXTENSIONS = {
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/webp": "webp",
    "image/gif": "gif",
}


def download_filename(prompt: str, mime_type: str = "image/png") -> str:
    """
    Build a download file name from the start of the prompt.

    Keeps letters, digits, '-' and '_' from the first characters of the
    prompt and turns spaces into underscores.
    """
    safe_prompt = "".join(
        c for c in prompt[:PROMPT_PREFIX_LENGTH] if c.isalnum() or c in (" ", "-", "_")
    ).strip()
    safe_prompt = safe_prompt.replace(" ", "_")
    extension = EXTENSIONS.get(mime_type, "png")
    if not safe_prompt:
        return f"{FILENAME_PREFIX}.{extension}"
    return f"{FILENAME_PREFIX}-{safe_prompt}.{extension}"


class LocalStorage:
    """
    Local file storage for downloaded gallery images.
    """

    def __init__(self, base_path: Path | None = None):
        self.base_path = Path(base_path or get_settings().storage_path)

    def _get_full_path(self, key: str) -> Path:
        """Get the full filesystem path for a storage key."""
        return self.base_path / key

    async def save_image(self, image: GeneratedImage) -> Path:
        """Write a gallery image to disk and return its path."""
        name = download_filename(image.prompt, image.image_data.mime_type)
        full_path = self._get_full_path(f"downloads/{image.id}/{name}")

        # Ensure parent directories exist
        full_path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(full_path, "wb") as f:
            await f.write(image.image_data.to_bytes())

        return full_path

    async def delete_image(self, image_id: str) -> None:
        """Delete any downloaded files of a gallery image."""
        image_dir = self._get_full_path(f"downloads/{image_id}")

        if image_dir.is_dir():
            for path in image_dir.iterdir():
                path.unlink()
            image_dir.rmdir()

    async def ensure_storage_exists(self) -> None:
        """Ensure storage is ready (create directories)."""
        (self.base_path / "downloads").mkdir(parents=True, exist_ok=True)


# Singleton instance
storage = LocalStorage()
