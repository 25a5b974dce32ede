from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.responses import FileResponse

from visionary.dependencies import get_session, get_storage
from visionary.models import GeneratedImage
from visionary.schemas import GeneratedImageInfo
from visionary.services.session import GenerationSession
from visionary.services.storage import LocalStorage, download_filename

router = APIRouter(prefix="/gallery", tags=["gallery"])


def _to_info(image: GeneratedImage) -> GeneratedImageInfo:
    return GeneratedImageInfo(
        id=image.id,
        prompt=image.prompt,
        aspect_ratio=image.aspect_ratio,
        created_at=image.created_at,
        mime_type=image.image_data.mime_type,
        image_url=image.image_data.data_uri,
    )


def _get_image_or_404(session: GenerationSession, image_id: str) -> GeneratedImage:
    image = session.get(image_id)
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Image with ID {image_id} not found."
        )
    return image


@router.get("", response_model=list[GeneratedImageInfo])
async def list_images(session: GenerationSession = Depends(get_session)):
    """Gallery entries, newest first."""
    return [_to_info(image) for image in session.images]


@router.get("/{image_id}", response_model=GeneratedImageInfo)
async def get_image(image_id: str, session: GenerationSession = Depends(get_session)):
    return _to_info(_get_image_or_404(session, image_id))


@router.delete("/{image_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_image(
    image_id: str,
    session: GenerationSession = Depends(get_session),
    storage: LocalStorage = Depends(get_storage),
):
    """Remove an image, and any downloaded copy, from the gallery. Deleting an unknown ID is a no-op."""
    if session.delete(image_id):
        await storage.delete_image(image_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{image_id}/download")
async def download_image(
    image_id: str,
    session: GenerationSession = Depends(get_session),
    storage: LocalStorage = Depends(get_storage),
):
    """Save the image locally and return it as an attachment."""
    image = _get_image_or_404(session, image_id)
    path = await storage.save_image(image)
    return FileResponse(
        path,
        media_type=image.image_data.mime_type,
        filename=download_filename(image.prompt, image.image_data.mime_type),
    )
