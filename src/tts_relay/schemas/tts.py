"""Schemas for synthesis options, API requests and results."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..services.tts.text_segmenter import DEFAULT_MAX_LENGTH
from ..services.tts.translate_client import REMOTE_TEXT_LIMIT

DEFAULT_HOST = "https://translate.google.com"
DEFAULT_LANG = "en"
DEFAULT_TIMEOUT_MS = 10000


class SynthesisOptions(BaseModel):
    """Options for a single synthesis request."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    lang: str = Field(
        default=DEFAULT_LANG,
        min_length=1,
        strict=True,
        description="Language code of the text, e.g. 'en' or 'pt-BR'.",
    )
    slow: bool = Field(
        default=False,
        strict=True,
        description="Request the slow speaking rate.",
    )
    host: str = Field(
        default=DEFAULT_HOST,
        min_length=1,
        strict=True,
        description="Base URL of the translate service.",
    )
    timeout: int = Field(
        default=DEFAULT_TIMEOUT_MS,
        gt=0,
        strict=True,
        description="Per-request timeout in milliseconds.",
    )


class LongSynthesisOptions(SynthesisOptions):
    """Options for synthesizing text of any length."""

    split_punct: str = Field(
        default="",
        strict=True,
        alias="splitPunct",
        description="Extra characters accepted as split points.",
    )
    max_length: int = Field(
        default=DEFAULT_MAX_LENGTH,
        gt=0,
        le=REMOTE_TEXT_LIMIT,
        strict=True,
        alias="maxLength",
        description="Maximum characters per chunk.",
    )
    max_concurrency: int = Field(
        default=1,
        ge=1,
        le=16,
        strict=True,
        alias="maxConcurrency",
        description="Chunks synthesized at once; 1 keeps requests sequential.",
    )


class SynthesisResult(BaseModel):
    """Audio for one chunk of the input text."""

    model_config = ConfigDict(populate_by_name=True)

    short_text: str = Field(alias="shortText")
    base64: str


class ChunkResource(BaseModel):
    """Serialized form of a text chunk."""

    model_config = ConfigDict(populate_by_name=True)

    text: str
    start_offset: int = Field(alias="startOffset")


class _OptionsRequest(BaseModel):
    # Option types are checked as strictly here as in SynthesisOptions
    model_config = ConfigDict(extra="forbid", populate_by_name=True, strict=True)

    text: str = Field(..., min_length=1)

    def options(self) -> dict[str, Any]:
        """Return the options the caller supplied, keyed by field name."""
        return self.model_dump(exclude_none=True, exclude={"text"})


class SplitRequest(_OptionsRequest):
    split_punct: str | None = Field(default=None, alias="splitPunct")
    max_length: int | None = Field(default=None, alias="maxLength")


class SplitResponse(BaseModel):
    chunks: list[ChunkResource] = Field(default_factory=list)


class AudioRequest(_OptionsRequest):
    lang: str | None = None
    slow: bool | None = None
    host: str | None = None
    timeout: int | None = None


class AudioResponse(BaseModel):
    base64: str


class LongAudioRequest(AudioRequest):
    split_punct: str | None = Field(default=None, alias="splitPunct")
    max_length: int | None = Field(default=None, alias="maxLength")
    max_concurrency: int | None = Field(default=None, alias="maxConcurrency")


class LongAudioResponse(BaseModel):
    results: list[SynthesisResult] = Field(default_factory=list)


__all__ = [
    "DEFAULT_HOST",
    "DEFAULT_LANG",
    "DEFAULT_TIMEOUT_MS",
    "AudioRequest",
    "AudioResponse",
    "ChunkResource",
    "LongAudioRequest",
    "LongAudioResponse",
    "LongSynthesisOptions",
    "SplitRequest",
    "SplitResponse",
    "SynthesisOptions",
    "SynthesisResult",
]
