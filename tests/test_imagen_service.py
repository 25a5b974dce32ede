"""Tests for :mod:`visionary.services.imagen`."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from visionary.errors import ConfigurationError, EmptyResponseError, RequestError
from visionary.models import GenerationRequest
from visionary.schemas.generation import AspectRatio
from visionary.services.imagen import NanoBananaService

BASE_URL = "https://example.test/v1beta/models"


def _image_response(data: str = "aW1hZ2U=", mime_type: str | None = "image/png") -> dict:
    inline = {"data": data}
    if mime_type:
        inline["mimeType"] = mime_type
    return {
        "candidates": [
            {
                "content": {
                    "parts": [
                        {"text": "Here is your image"},
                        {"inlineData": inline},
                        {"inlineData": {"mimeType": "image/png", "data": "c2Vjb25k"}},
                    ]
                }
            }
        ]
    }


def _service(handler, api_key: str = "test-key") -> NanoBananaService:
    return NanoBananaService(
        api_key=api_key,
        model="gemini-2.5-flash-image",
        base_url=BASE_URL,
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


def _generate(service: NanoBananaService, prompt: str = "a red fox", ratio: str = "16:9"):
    return asyncio.run(service.generate(GenerationRequest.create(prompt, ratio)))


def test_sends_prompt_and_aspect_ratio_in_single_call() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=_image_response())

    payload = _generate(_service(handler))

    assert len(seen) == 1
    request = seen[0]
    assert request.method == "POST"
    assert str(request.url) == f"{BASE_URL}/gemini-2.5-flash-image:generateContent"
    assert request.headers["x-goog-api-key"] == "test-key"
    body = json.loads(request.content)
    assert body["contents"] == [{"parts": [{"text": "a red fox"}]}]
    assert body["generationConfig"]["imageConfig"] == {"aspectRatio": "16:9"}
    assert payload.data == "aW1hZ2U="
    assert payload.mime_type == "image/png"


def test_defaults_mime_type_when_missing() -> None:
    payload = _generate(_service(lambda request: httpx.Response(200, json=_image_response(mime_type=None))))

    assert payload.mime_type == "image/png"
    assert payload.data_uri == "data:image/png;base64,aW1hZ2U="


def test_missing_api_key_fails_before_any_call() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=_image_response())

    with pytest.raises(ConfigurationError):
        _generate(_service(handler, api_key=""))
    assert calls == []


def test_api_key_is_read_from_settings_on_first_use(monkeypatch: pytest.MonkeyPatch) -> None:
    from visionary.services import imagen

    class _Settings:
        gemini_api_key = "from-settings"

    service = NanoBananaService(
        api_key=None,
        base_url=BASE_URL,
        transport=httpx.MockTransport(lambda request: httpx.Response(200, json=_image_response())),
    )
    monkeypatch.setattr(imagen, "get_settings", lambda: _Settings())

    assert service._resolve_api_key() == "from-settings"
    monkeypatch.setattr(imagen, "get_settings", lambda: pytest.fail("settings read twice"))
    assert service._resolve_api_key() == "from-settings"


@pytest.mark.parametrize("status_code", [400, 403, 429, 500, 503])
def test_non_200_status_is_request_error(status_code: int) -> None:
    service = _service(lambda request: httpx.Response(status_code, text="nope"))

    with pytest.raises(RequestError, match=str(status_code)):
        _generate(service)


@pytest.mark.parametrize("error_type", [httpx.ConnectError, httpx.ReadTimeout])
def test_transport_failures_are_request_errors(error_type: type[httpx.HTTPError]) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise error_type("network down", request=request)

    with pytest.raises(RequestError):
        _generate(_service(handler))


def test_malformed_json_is_request_error() -> None:
    service = _service(lambda request: httpx.Response(200, content=b"<html>oops</html>"))

    with pytest.raises(RequestError):
        _generate(service)


@pytest.mark.parametrize(
    "body",
    [
        {},
        {"candidates": []},
        {"candidates": [], "promptFeedback": {"blockReason": "SAFETY"}},
        {"candidates": [{"content": {"parts": []}}]},
        {"candidates": [{"finishReason": "SAFETY"}]},
        {"candidates": [{"content": {"parts": [{"text": "I can't draw that"}]}}]},
        {"candidates": [{"content": {"parts": [{"inlineData": {"mimeType": "image/png", "data": ""}}]}}]},
    ],
)
def test_response_without_image_is_empty_response_error(body: dict) -> None:
    service = _service(lambda request: httpx.Response(200, json=body))

    with pytest.raises(EmptyResponseError):
        _generate(service)


def test_only_first_candidate_is_scanned() -> None:
    body = {
        "candidates": [
            {"content": {"parts": [{"text": "no image here"}]}},
            {"content": {"parts": [{"inlineData": {"mimeType": "image/png", "data": "aW1hZ2U="}}]}},
        ]
    }

    with pytest.raises(EmptyResponseError):
        _generate(_service(lambda request: httpx.Response(200, json=body)))


def test_default_ratio_is_square() -> None:
    seen: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json=_image_response())

    asyncio.run(_service(handler).generate(GenerationRequest.create("a fox")))

    assert seen[0]["generationConfig"]["imageConfig"]["aspectRatio"] == AspectRatio.SQUARE.value


@pytest.mark.parametrize(
    "body",
    [
        [1, 2],
        "just text",
        {"candidates": "not-a-list"},
        {"candidates": [1]},
        {"candidates": [{"content": {"parts": "not-a-list"}}]},
        {"candidates": [{"content": {"parts": [1, {"inlineData": {"data": "aW1hZ2U="}}]}}]},
    ],
)
def test_malformed_response_shape_is_request_error(body) -> None:
    service = _service(lambda request: httpx.Response(200, json=body))

    with pytest.raises(RequestError, match="malformed"):
        _generate(service)
