import asyncio
import logging
from typing import Any, List, Optional

import httpx
from pydantic import ValidationError

from ..config import Settings, get_settings
from ..errors import InvalidInputError
from ..schemas.tts import LongSynthesisOptions, SynthesisOptions, SynthesisResult
from .tts.text_segmenter import Chunk, SplitConfig, split_text
from .tts.translate_client import synthesize_one

logger = logging.getLogger(__name__)


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()))
        parts.append(f"{location}: {error.get('msg')}" if location else error["msg"])
    return "; ".join(parts)


class TTSService:
    """
    Service for converting text of any length into base64 audio.

    Short text is sent to the translate endpoint in one request. Long text is
    first split into chunks that fit the endpoint's length limit, then each
    chunk is synthesized and returned alongside its text, in input order.

    Options left unset by the caller fall back to the values in ``Settings``.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings()
        self._http_client = http_client
        self._owns_client = False

    @property
    def settings(self) -> Settings:
        return self._settings

    def get_http_client(self) -> httpx.AsyncClient:
        """Get the shared HTTP client, creating one on first use."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient()
            self._owns_client = True
            logger.info("Created shared httpx.AsyncClient for TTS")
        return self._http_client

    async def aclose(self) -> None:
        """Close the shared HTTP client if this service created it."""
        if self._http_client is not None and self._owns_client:
            await self._http_client.aclose()
            self._http_client = None
            self._owns_client = False
            logger.info("Closed TTS HTTP client")

    def resolve_options(self, **overrides: Any) -> SynthesisOptions:
        """Merge overrides onto the configured defaults and validate them."""
        data = {**self._settings.synthesis_defaults(), **_drop_none(overrides)}
        try:
            return SynthesisOptions.model_validate(data)
        except ValidationError as exc:
            raise InvalidInputError(_format_validation_error(exc)) from exc

    def resolve_long_options(self, **overrides: Any) -> LongSynthesisOptions:
        """Like ``resolve_options`` with the splitting and fan-out options."""
        data = {**self._settings.long_synthesis_defaults(), **_drop_none(overrides)}
        try:
            return LongSynthesisOptions.model_validate(data)
        except ValidationError as exc:
            raise InvalidInputError(_format_validation_error(exc)) from exc

    def split(
        self,
        text: str,
        *,
        split_punct: Optional[str] = None,
        max_length: Optional[int] = None,
    ) -> List[Chunk]:
        """Split text the way ``synthesize_long`` would, without synthesizing."""
        _require_text(text)
        options = self.resolve_long_options(
            split_punct=split_punct, max_length=max_length
        )
        config = SplitConfig.from_options(options.max_length, options.split_punct)
        return split_text(text, config)

    async def synthesize_short(self, text: str, **options: Any) -> str:
        """
        Synthesize text of at most 200 characters in a single request.

        Raises:
            InvalidInputError: Empty text or invalid option
            TextTooLongError: Text exceeds the endpoint limit
            TransportError, UnsupportedLanguageError, ResponseParseError
        """
        _require_text(text)
        resolved = self.resolve_options(**options)
        return await synthesize_one(
            text,
            lang=resolved.lang,
            slow=resolved.slow,
            host=resolved.host,
            timeout=resolved.timeout,
            client=self.get_http_client(),
        )

    async def synthesize_long(self, text: str, **options: Any) -> List[SynthesisResult]:
        """
        Split text into chunks and synthesize each one.

        Results follow the order of the chunks in the text. The first failure
        is raised and no partial list is returned.
        """
        _require_text(text)
        resolved = self.resolve_long_options(**options)
        config = SplitConfig.from_options(resolved.max_length, resolved.split_punct)
        chunks = split_text(text, config)

        logger.info(
            f"Synthesizing {len(text)} chars as {len(chunks)} chunk(s) "
            f"(lang={resolved.lang}, concurrency={resolved.max_concurrency})"
        )

        if resolved.max_concurrency == 1:
            audios = []
            for chunk in chunks:
                audios.append(await self._synthesize_chunk(chunk, resolved))
        else:
            audios = await self._synthesize_concurrently(chunks, resolved)

        return [
            SynthesisResult(short_text=chunk.text, base64=audio)
            for chunk, audio in zip(chunks, audios)
        ]

    async def _synthesize_chunk(self, chunk: Chunk, options: SynthesisOptions) -> str:
        return await synthesize_one(
            chunk.text,
            lang=options.lang,
            slow=options.slow,
            host=options.host,
            timeout=options.timeout,
            client=self.get_http_client(),
        )

    async def _synthesize_concurrently(
        self, chunks: List[Chunk], options: LongSynthesisOptions
    ) -> List[str]:
        """Synthesize chunks with bounded concurrency, cancelling on first failure."""
        semaphore = asyncio.Semaphore(options.max_concurrency)

        async def _run(chunk: Chunk) -> str:
            async with semaphore:
                return await self._synthesize_chunk(chunk, options)

        tasks = [asyncio.create_task(_run(chunk)) for chunk in chunks]
        try:
            done, _ = await asyncio.wait(
                tasks, return_when=asyncio.FIRST_EXCEPTION
            )
            for task in tasks:
                if task in done and task.exception() is not None:
                    raise task.exception()
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        return [task.result() for task in tasks]


def _drop_none(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


def _require_text(text: Any) -> None:
    if not isinstance(text, str) or text == "":
        raise InvalidInputError("text should be a non-empty string")


# Singleton instance
_instance: Optional[TTSService] = None


def get_tts_service() -> TTSService:
    """Get the singleton service instance."""
    global _instance
    if _instance is None:
        _instance = TTSService()
    return _instance


async def generate_audio(text: str, **options: Any) -> str:
    """Synthesize short text with the shared service."""
    return await get_tts_service().synthesize_short(text, **options)


async def generate_long_audio(text: str, **options: Any) -> List[SynthesisResult]:
    """Synthesize text of any length with the shared service."""
    return await get_tts_service().synthesize_long(text, **options)


__all__ = [
    "TTSService",
    "generate_audio",
    "generate_long_audio",
    "get_tts_service",
]
