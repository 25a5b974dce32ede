import asyncio
import random
from datetime import datetime, timezone

from visionary.config import get_settings
from visionary.errors import GENERIC_FAILURE_MESSAGE, ProviderError, ValidationError
from visionary.models import GeneratedImage, GenerationRequest
from visionary.schemas.generation import AspectRatio, SessionInfo, SessionState
from visionary.services.base import ImageGenerationClient
from visionary.services.prompts import (
    SAMPLE_PROMPTS,
    STATUS_MESSAGES,
    new_image_id,
    pick_random_prompt,
)
from visionary.services.status import SleepFunc, StatusRotator
from visionary.utils.logger import get_logger

logger = get_logger("services.session")


class GenerationSession:
    """
    Owns one user's generation lifecycle and gallery.

    Exactly one request may be in flight. ``start()`` claims the slot with a
    synchronous check-and-set, so concurrent callers on the same event loop
    cannot both get past the guard. Every exit from a request returns the
    session to ``IDLE`` and stops the status rotation.
    """

    def __init__(
        self,
        client: ImageGenerationClient,
        *,
        rng: random.Random | None = None,
        sample_prompts=SAMPLE_PROMPTS,
        status_messages=STATUS_MESSAGES,
        status_interval: float | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        if status_interval is None:
            status_interval = get_settings().status_interval_seconds
        self.client = client
        self.sample_prompts = tuple(sample_prompts)
        self._rng = rng
        self._prompt_rng = rng or random.Random()
        self._rotator = StatusRotator(status_messages, status_interval, sleep=sleep)

        self._state = SessionState.IDLE
        self._images: list[GeneratedImage] = []
        self._prompt = ""
        self._aspect_ratio = AspectRatio.SQUARE
        self._error: str | None = None
        self._task: asyncio.Task | None = None

    # Read access

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_generating(self) -> bool:
        return self._state is SessionState.IN_FLIGHT

    @property
    def status(self) -> str | None:
        return self._rotator.current

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def prompt(self) -> str:
        return self._prompt

    @property
    def aspect_ratio(self) -> AspectRatio:
        return self._aspect_ratio

    @property
    def images(self) -> tuple[GeneratedImage, ...]:
        """Gallery entries, newest first."""
        return tuple(self._images)

    def get(self, image_id: str) -> GeneratedImage | None:
        for image in self._images:
            if image.id == image_id:
                return image
        return None

    def snapshot(self) -> SessionInfo:
        return SessionInfo(
            state=self._state,
            is_generating=self.is_generating,
            status=self.status,
            error=self._error,
            prompt=self._prompt,
            aspect_ratio=self._aspect_ratio,
            gallery_size=len(self._images),
        )

    # Input editing

    def set_prompt(self, text: str) -> None:
        self._prompt = text

    def select_aspect_ratio(self, aspect_ratio: AspectRatio | str) -> None:
        self._aspect_ratio = AspectRatio(aspect_ratio)

    def pick_random_prompt(self) -> str:
        """Replace the prompt input with a random sample prompt."""
        self._prompt = pick_random_prompt(self._prompt_rng, self.sample_prompts)
        return self._prompt

    # Gallery

    def delete(self, image_id: str) -> bool:
        """Remove the entry with this id. Returns False if there was none."""
        for index, image in enumerate(self._images):
            if image.id == image_id:
                del self._images[index]
                logger.info("Deleted image %s", image_id)
                return True
        return False

    # Generation lifecycle

    def _try_begin(self, request: GenerationRequest) -> bool:
        # No await between the check and the set
        if self._state is SessionState.IN_FLIGHT:
            return False
        # Raises RuntimeError outside an event loop, before any state changes
        loop = asyncio.get_running_loop()
        self._state = SessionState.IN_FLIGHT
        self._error = None
        self._rotator.start()
        self._task = loop.create_task(self._run(request))
        return True

    def start(
        self,
        prompt: str | None = None,
        aspect_ratio: AspectRatio | str | None = None,
    ) -> bool:
        """
        Submit a request without waiting for it.

        The prompt and aspect ratio default to the current input. Returns False,
        with no side effect, when the prompt is blank or a request is already
        in flight.
        """
        text = self._prompt if prompt is None else prompt
        ratio = self._aspect_ratio if aspect_ratio is None else AspectRatio(aspect_ratio)
        try:
            request = GenerationRequest.create(text, ratio)
        except ValidationError:
            logger.debug("Ignoring submission with an empty prompt")
            return False

        if not self._try_begin(request):
            logger.debug("Ignoring submission, a request is already in flight")
            return False

        self._prompt = text
        self._aspect_ratio = ratio
        logger.info("Generation started (aspect_ratio=%s)", ratio.value)
        return True

    async def submit(
        self,
        prompt: str | None = None,
        aspect_ratio: AspectRatio | str | None = None,
    ) -> bool:
        """Submit a request and wait for it to resolve. Returns whether it was accepted."""
        if not self.start(prompt, aspect_ratio):
            return False
        await self.wait()
        return True

    async def wait(self) -> None:
        """Wait for the in-flight request, if any, to resolve."""
        if self._task is not None:
            await asyncio.shield(self._task)

    async def _run(self, request: GenerationRequest) -> None:
        try:
            payload = await self.client.generate(request)
            image = GeneratedImage(
                id=new_image_id(self._rng),
                image_data=payload,
                prompt=request.prompt,
                aspect_ratio=request.aspect_ratio,
                created_at=datetime.now(timezone.utc),
            )
            self._images.insert(0, image)
            self._prompt = ""
            self._error = None
            logger.info("Generation finished, added image %s", image.id)
        except ProviderError as e:
            logger.warning("Generation failed: %s", e)
            self._error = e.user_message
        except Exception:
            logger.exception("Unexpected error during generation")
            self._error = GENERIC_FAILURE_MESSAGE
        finally:
            self._rotator.stop()
            self._state = SessionState.IDLE
            self._task = None

    async def close(self) -> None:
        """Cancel any in-flight request. Used on application shutdown."""
        task = self._task
        if task is not None:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        # A task cancelled before its first step never reaches _run's finally
        self._rotator.stop()
        self._state = SessionState.IDLE
        self._task = None
