from fastapi import APIRouter, Depends, Response, status

from visionary.dependencies import get_session
from visionary.schemas import (
    AspectRatio,
    GenerateImageRequest,
    GenerateImageResponse,
    SessionInfo,
    SurprisePromptResponse,
    UpdatePromptRequest,
)
from visionary.services.session import GenerationSession

router = APIRouter(tags=["generation"])


@router.get("/session", response_model=SessionInfo)
async def get_session_info(session: GenerationSession = Depends(get_session)):
    """
    Current session state.

    Poll this while a generation is in flight: ``status`` rotates through
    progress messages and ``error`` holds the last failure, if any.
    """
    return session.snapshot()


@router.put("/session/prompt", response_model=SessionInfo)
async def update_prompt(
    request: UpdatePromptRequest,
    session: GenerationSession = Depends(get_session),
):
    """Edit the prompt input and/or the selected aspect ratio."""
    if request.prompt is not None:
        session.set_prompt(request.prompt)
    if request.aspect_ratio is not None:
        session.select_aspect_ratio(request.aspect_ratio)
    return session.snapshot()


@router.post("/session/surprise", response_model=SurprisePromptResponse)
async def surprise_me(session: GenerationSession = Depends(get_session)):
    """Replace the prompt input with a random sample prompt."""
    return SurprisePromptResponse(prompt=session.pick_random_prompt())


@router.post("/generate", response_model=GenerateImageResponse)
async def generate_image(
    response: Response,
    request: GenerateImageRequest | None = None,
    session: GenerationSession = Depends(get_session),
):
    """
    Start generating an image.

    The request runs in the background; poll ``GET /session`` for progress and
    ``GET /gallery`` for the result. A submission is ignored while another one
    is in flight or when the prompt is blank.
    """
    request = request or GenerateImageRequest()
    accepted = session.start(prompt=request.prompt, aspect_ratio=request.aspect_ratio)

    if accepted:
        response.status_code = status.HTTP_202_ACCEPTED
        message = "Generation started"
    elif session.is_generating:
        message = "A generation is already in progress"
    else:
        message = "Prompt is empty"

    return GenerateImageResponse(
        accepted=accepted,
        session=session.snapshot(),
        message=message,
    )


@router.get("/aspect-ratios", response_model=list[AspectRatio])
async def list_aspect_ratios():
    """Supported aspect ratios."""
    return list(AspectRatio)
