"""Shared fakes and fixtures for the Visionary test-suite."""

from __future__ import annotations

import asyncio
import random

import pytest

from visionary.models import GenerationRequest, ImagePayload
from visionary.services.base import ImageGenerationClient
from visionary.services.prompts import STATUS_MESSAGES
from visionary.services.session import GenerationSession

# PNG signature, base64 encoded
PNG_B64 = "iVBORw0KGgo="


class FakeImageClient(ImageGenerationClient):
    """Records requests; optionally blocks on a gate or raises an error."""

    def __init__(self, payload: ImagePayload | None = None, error: BaseException | None = None) -> None:
        self.payload = payload or ImagePayload(data=PNG_B64)
        self.error = error
        self.calls: list[GenerationRequest] = []
        self.gate: asyncio.Event | None = None

    async def generate(self, request: GenerationRequest) -> ImagePayload:
        self.calls.append(request)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.payload


class ManualTicker:
    """Replacement for ``asyncio.sleep`` that only returns when ticked."""

    def __init__(self) -> None:
        self.intervals: list[float] = []
        self._ticks: asyncio.Queue | None = None

    def _queue(self) -> asyncio.Queue:
        if self._ticks is None:
            self._ticks = asyncio.Queue()
        return self._ticks

    async def sleep(self, seconds: float) -> None:
        self.intervals.append(seconds)
        await self._queue().get()

    def tick(self) -> None:
        self._queue().put_nowait(None)


async def settle(rounds: int = 5) -> None:
    """Let scheduled tasks run up to their next suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def fake_client() -> FakeImageClient:
    return FakeImageClient()


@pytest.fixture
def ticker() -> ManualTicker:
    return ManualTicker()


@pytest.fixture
def session(fake_client: FakeImageClient, ticker: ManualTicker) -> GenerationSession:
    return GenerationSession(
        fake_client,
        rng=random.Random(1234),
        status_messages=STATUS_MESSAGES,
        status_interval=3.0,
        sleep=ticker.sleep,
    )
