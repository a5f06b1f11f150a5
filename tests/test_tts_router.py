from __future__ import annotations

from collections.abc import Generator

import httpx
import pytest
from fastapi.testclient import TestClient

from tts_fakes import TEST_HOST, audio_body, decode_request_text, fake_audio
from tts_relay.app import create_app
from tts_relay.config import Settings
from tts_relay.services.tts_service import TTSService


def _handler(request: httpx.Request) -> httpx.Response:
    text, lang, _ = decode_request_text(request.content)
    if lang == "xx":
        return httpx.Response(200, text=audio_body(None))
    if lang == "down":
        return httpx.Response(500, text="error")
    return httpx.Response(200, text=audio_body(fake_audio(text)))


@pytest.fixture
def upstream_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def tts_client(
    isolated_settings, upstream_requests: list[httpx.Request]
) -> Generator[TestClient, None, None]:
    """Fixture providing a test client backed by a fake translate endpoint."""

    def _record(request: httpx.Request) -> httpx.Response:
        upstream_requests.append(request)
        return _handler(request)

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(_record))
    service = TTSService(Settings(tts_host=TEST_HOST), http_client=http_client)
    app = create_app(tts_service=service)

    with TestClient(app) as client:
        yield client


def test_split_endpoint_returns_chunks_with_offsets(tts_client: TestClient) -> None:
    response = tts_client.post(
        "/api/tts/split", json={"text": "hello world foo", "maxLength": 10}
    )

    assert response.status_code == 200
    assert response.json() == {
        "chunks": [
            {"text": "hello ", "startOffset": 0},
            {"text": "world foo", "startOffset": 6},
        ]
    }


def test_split_endpoint_reports_unsplittable_text(tts_client: TestClient) -> None:
    response = tts_client.post(
        "/api/tts/split", json={"text": "abcdefghij", "maxLength": 5}
    )

    assert response.status_code == 422
    assert "abcde" in response.json()["detail"]


def test_audio_endpoint_returns_base64(tts_client: TestClient) -> None:
    response = tts_client.post("/api/tts/audio", json={"text": "Hello", "lang": "en"})

    assert response.status_code == 200
    assert response.json() == {"base64": fake_audio("Hello")}


def test_audio_endpoint_rejects_long_text(tts_client: TestClient) -> None:
    response = tts_client.post("/api/tts/audio", json={"text": "a" * 201})

    assert response.status_code == 413
    assert "201" in response.json()["detail"]


def test_audio_endpoint_unsupported_language(tts_client: TestClient) -> None:
    response = tts_client.post("/api/tts/audio", json={"text": "Hello", "lang": "xx"})

    assert response.status_code == 400
    assert response.json()["detail"] == 'lang "xx" might not exist'


def test_audio_endpoint_upstream_failure(tts_client: TestClient) -> None:
    response = tts_client.post(
        "/api/tts/audio", json={"text": "Hello", "lang": "down"}
    )

    assert response.status_code == 502


def test_audio_endpoint_rejects_empty_text(tts_client: TestClient) -> None:
    response = tts_client.post("/api/tts/audio", json={"text": ""})

    assert response.status_code == 422


def test_audio_endpoint_rejects_invalid_timeout(tts_client: TestClient) -> None:
    response = tts_client.post("/api/tts/audio", json={"text": "Hi", "timeout": 0})

    assert response.status_code == 422


@pytest.mark.parametrize(
    "path, payload",
    [
        ("/api/tts/audio", {"text": "hi", "timeout": "1000"}),
        ("/api/tts/audio", {"text": "hi", "slow": "yes"}),
        ("/api/tts/audio", {"text": "hi", "lang": 1}),
        ("/api/tts/audio/long", {"text": "hi", "maxLength": "20"}),
        ("/api/tts/audio/long", {"text": "hi", "maxConcurrency": 2.0}),
        ("/api/tts/split", {"text": "hi", "maxLength": True}),
    ],
)
def test_endpoints_reject_mistyped_options_before_any_request(
    tts_client: TestClient,
    upstream_requests: list[httpx.Request],
    path: str,
    payload: dict,
) -> None:
    response = tts_client.post(path, json=payload)

    assert response.status_code == 422
    assert upstream_requests == []


def test_long_audio_endpoint_returns_ordered_results(tts_client: TestClient) -> None:
    text = "First sentence here. Second sentence follows. Third one ends it."

    response = tts_client.post(
        "/api/tts/audio/long",
        json={"text": text, "maxLength": 25, "maxConcurrency": 2},
    )

    assert response.status_code == 200
    results = response.json()["results"]
    assert len(results) > 1
    assert "".join(item["shortText"] for item in results) == text
    assert all(item["base64"] == fake_audio(item["shortText"]) for item in results)


def test_health_reports_configuration(tts_client: TestClient) -> None:
    response = tts_client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["remote_limit"] == 200
