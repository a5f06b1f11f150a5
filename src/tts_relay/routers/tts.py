"""Speech synthesis API routes."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from ..errors import TTSError
from ..schemas.tts import (
    AudioRequest,
    AudioResponse,
    ChunkResource,
    LongAudioRequest,
    LongAudioResponse,
    SplitRequest,
    SplitResponse,
)
from ..services.tts_service import TTSService, get_tts_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/tts", tags=["tts"])


def get_service(request: Request) -> TTSService:
    service = getattr(request.app.state, "tts_service", None)
    return service if service is not None else get_tts_service()


@router.post("/split", response_model=SplitResponse)
async def split_text(
    payload: SplitRequest,
    service: TTSService = Depends(get_service),
) -> SplitResponse:
    """Preview how text would be chunked without calling the endpoint."""

    try:
        chunks = service.split(payload.text, **payload.options())
    except TTSError as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc

    return SplitResponse(
        chunks=[
            ChunkResource(text=chunk.text, start_offset=chunk.start_offset)
            for chunk in chunks
        ]
    )


@router.post("/audio", response_model=AudioResponse)
async def synthesize_audio(
    payload: AudioRequest,
    service: TTSService = Depends(get_service),
) -> AudioResponse:
    try:
        audio = await service.synthesize_short(payload.text, **payload.options())
    except TTSError as exc:
        logger.warning(f"Short synthesis failed: {exc}")
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc

    return AudioResponse(base64=audio)


@router.post("/audio/long", response_model=LongAudioResponse)
async def synthesize_long_audio(
    payload: LongAudioRequest,
    service: TTSService = Depends(get_service),
) -> LongAudioResponse:
    """Synthesize text of any length as an ordered list of chunk audios."""

    try:
        results = await service.synthesize_long(payload.text, **payload.options())
    except TTSError as exc:
        logger.warning(f"Long synthesis failed: {exc}")
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc

    return LongAudioResponse(results=results)
