"""Client for the Google Translate speech RPC used to synthesize one chunk."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional
from urllib.parse import quote_plus

import httpx

from ...errors import (
    InvalidInputError,
    ResponseParseError,
    TextTooLongError,
    TransportError,
    UnsupportedLanguageError,
)

logger = logging.getLogger(__name__)

REMOTE_TEXT_LIMIT = 200
BATCH_EXECUTE_PATH = "/_/TranslateWebserverUi/data/batchexecute"
RPC_ID = "jQ1olc"

# The body starts with the anti-XSSI guard ")]}'\n" ahead of the JSON payload
_RESPONSE_PREAMBLE_LENGTH = 5

_COMPACT = (",", ":")
_FORM_HEADERS = {"Content-Type": "application/x-www-form-urlencoded;charset=utf-8"}


def validate_request(text: str, lang: str, host: str, timeout: Any) -> None:
    """Check the arguments of a synthesis call before any network activity."""
    if not isinstance(text, str) or text == "":
        raise InvalidInputError("text should be a non-empty string")
    if not isinstance(lang, str) or lang == "":
        raise InvalidInputError("lang should be a non-empty string")
    if not isinstance(host, str) or host == "":
        raise InvalidInputError("host should be a non-empty string")
    if isinstance(timeout, bool) or not isinstance(timeout, int) or timeout <= 0:
        raise InvalidInputError("timeout should be a positive number")
    if len(text) > REMOTE_TEXT_LIMIT:
        raise TextTooLongError(len(text), REMOTE_TEXT_LIMIT)


def build_request_body(text: str, lang: str, slow: bool) -> str:
    """Encode the form body carrying the RPC envelope for one chunk."""
    inner = json.dumps(
        [text, lang, True if slow else None, "null"], separators=_COMPACT
    )
    envelope = [[[RPC_ID, inner, None, "generic"]]]
    return "f.req=" + quote_plus(json.dumps(envelope, separators=_COMPACT))


def parse_audio_response(body: str, lang: str) -> str:
    """Extract the base64 audio from a ``batchexecute`` response body."""
    try:
        parsed = json.loads(body[_RESPONSE_PREAMBLE_LENGTH:])
    except ValueError as exc:
        raise ResponseParseError(
            f"parse response failed: invalid JSON ({exc})"
        ) from exc

    try:
        payload = parsed[0][2]
    except (IndexError, KeyError, TypeError) as exc:
        raise ResponseParseError("parse response failed: unexpected structure") from exc

    if not payload:
        raise UnsupportedLanguageError(lang)

    if not isinstance(payload, str):
        raise ResponseParseError("parse response failed: unexpected structure")

    try:
        audio = json.loads(payload)[0]
    except (ValueError, IndexError, KeyError, TypeError) as exc:
        raise ResponseParseError("parse response failed: unexpected structure") from exc

    if not isinstance(audio, str) or not audio:
        raise ResponseParseError("parse response failed: unexpected structure")
    return audio


async def synthesize_one(
    text: str,
    *,
    lang: str = "en",
    slow: bool = False,
    host: str = "https://translate.google.com",
    timeout: int = 10000,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """
    Synthesize one chunk of text and return its base64-encoded audio.

    ``timeout`` is in milliseconds. A single attempt is made; failures are
    raised to the caller.
    """
    validate_request(text, lang, host, timeout)

    url = host.rstrip("/") + BATCH_EXECUTE_PATH
    data = build_request_body(text, lang, slow)
    request_timeout = httpx.Timeout(timeout / 1000)

    logger.debug(f"Synthesizing {len(text)} chars (lang={lang}, slow={slow})")
    try:
        if client is None:
            async with httpx.AsyncClient(timeout=request_timeout) as owned_client:
                response = await owned_client.post(
                    url, content=data, headers=_FORM_HEADERS
                )
                response.raise_for_status()
        else:
            response = await client.post(
                url, content=data, headers=_FORM_HEADERS, timeout=request_timeout
            )
            response.raise_for_status()
    except httpx.TimeoutException as exc:
        logger.warning(f"TTS request to {url} timed out after {timeout}ms")
        raise TransportError(f"Request timed out after {timeout}ms") from exc
    except httpx.HTTPStatusError as exc:
        logger.warning(
            f"TTS request to {url} failed with status {exc.response.status_code}"
        )
        raise TransportError(
            f"Request failed with status {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        logger.warning(f"TTS request to {url} failed: {exc}")
        raise TransportError(f"Request failed: {exc}") from exc

    return parse_audio_response(response.text, lang)


__all__ = [
    "BATCH_EXECUTE_PATH",
    "REMOTE_TEXT_LIMIT",
    "RPC_ID",
    "build_request_body",
    "parse_audio_response",
    "synthesize_one",
    "validate_request",
]
