"""
TTS (Text-to-Speech) Services Package.

This package contains the two layers behind long-text synthesis:

- text_segmenter: Splits long text into chunks within the endpoint limit
- translate_client: Synthesizes one chunk through the translate speech RPC

Architecture Overview:

    ┌─────────────┐     ┌────────────┐     ┌──────────────────┐     ┌──────────────┐
    │  long text  │────▶│ split_text │────▶│ synthesize_one() │────▶│ [{shortText, │
    └─────────────┘     └────────────┘     │   per chunk      │     │   base64}]   │
                                           └──────────────────┘     └──────────────┘

Chunks are synthesized independently and returned in input order; merging
the audio is left to the caller.
"""

from .text_segmenter import Chunk, SplitConfig, is_break_point, split_text
from .translate_client import REMOTE_TEXT_LIMIT, synthesize_one

__all__ = [
    "Chunk",
    "REMOTE_TEXT_LIMIT",
    "SplitConfig",
    "is_break_point",
    "split_text",
    "synthesize_one",
]
