"""
Text Segmenter for Long-Text Synthesis.

This module splits arbitrarily long text into chunks that each fit within the
per-request length limit of the remote synthesis endpoint. Chunks are cut only
at whitespace or punctuation so no word is broken across two requests.

Architecture:
    long text → split_text() → [Chunk, Chunk, ...] → one synthesis call each

Lengths and offsets are measured in codepoints (Python string indices), so a
multi-byte or astral character is never cut in half.

Usage:
    config = SplitConfig.from_options(max_length=200, split_punct="、。")
    for chunk in split_text(text, config):
        audio = await synthesize_one(chunk.text, ...)

Concatenating the chunk texts in order always reproduces the input exactly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from ...errors import InvalidInputError, SegmentationError

logger = logging.getLogger(__name__)

DEFAULT_MAX_LENGTH = 200

# str.isspace() covers Unicode whitespace but not the BOM / zero-width no-break space
EXTRA_SPACE_CHARACTERS: FrozenSet[str] = frozenset("\ufeff")
DEFAULT_PUNCTUATION: FrozenSet[str] = frozenset("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~")


@dataclass(frozen=True)
class SplitConfig:
    """
    Options controlling how text is split.

    Attributes:
        max_length: Maximum codepoints per chunk (default: 200)
        extra_punctuation: Characters accepted as break points in addition to
                           whitespace and ASCII punctuation
    """

    max_length: int = DEFAULT_MAX_LENGTH
    extra_punctuation: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if (
            isinstance(self.max_length, bool)
            or not isinstance(self.max_length, int)
            or self.max_length <= 0
        ):
            raise InvalidInputError("max_length should be a positive integer")
        if not isinstance(self.extra_punctuation, frozenset):
            object.__setattr__(
                self, "extra_punctuation", frozenset(self.extra_punctuation)
            )

    @classmethod
    def from_options(
        cls, max_length: int = DEFAULT_MAX_LENGTH, split_punct: str = ""
    ) -> "SplitConfig":
        """Build a config from the caller-facing ``split_punct`` string."""
        if not isinstance(split_punct, str):
            raise InvalidInputError("split_punct should be a string")
        return cls(max_length=max_length, extra_punctuation=frozenset(split_punct))


@dataclass(frozen=True)
class Chunk:
    """One contiguous piece of the input text."""

    text: str
    start_offset: int

    @property
    def end_offset(self) -> int:
        """Offset one past the last codepoint of the chunk."""
        return self.start_offset + len(self.text)

    def __len__(self) -> int:
        return len(self.text)


def is_break_point(
    text: str, index: int, extra_punctuation: FrozenSet[str] = frozenset()
) -> bool:
    """Return True if the codepoint at ``index`` may end a chunk."""
    if index < 0 or index >= len(text):
        return False
    char = text[index]
    return (
        char.isspace()
        or char in EXTRA_SPACE_CHARACTERS
        or char in DEFAULT_PUNCTUATION
        or char in extra_punctuation
    )


def last_break_point(
    text: str, left: int, right: int, extra_punctuation: FrozenSet[str] = frozenset()
) -> int:
    """Return the rightmost break point in ``[left, right]``, or -1 if none."""
    for index in range(right, left - 1, -1):
        if is_break_point(text, index, extra_punctuation):
            return index
    return -1


def split_text(text: str, config: Optional[SplitConfig] = None) -> List[Chunk]:
    """
    Split text into chunks of at most ``config.max_length`` codepoints.

    The cut is placed right after the window when the last character of the
    window or the character following it is a break point. Otherwise the
    window is shrunk back to its rightmost break point.

    Args:
        text: Text to split
        config: Split options; defaults to ``SplitConfig()``

    Returns:
        Chunks in input order

    Raises:
        SegmentationError: A run of ``max_length`` codepoints contains no
                           break point
    """
    config = config or SplitConfig()
    max_length = config.max_length
    extra = config.extra_punctuation

    chunks: List[Chunk] = []
    if not text:
        return chunks

    start = 0
    while True:
        if len(text) - start <= max_length:
            chunks.append(Chunk(text[start:], start))
            break

        end = start + max_length - 1

        if is_break_point(text, end, extra) or is_break_point(text, end + 1, extra):
            chunks.append(Chunk(text[start : end + 1], start))
            start = end + 1
            continue

        end = last_break_point(text, start, end, extra)
        if end == -1:
            fragment = text[start : start + max_length]
            logger.debug(f"No break point within {max_length} chars at offset {start}")
            raise SegmentationError(fragment, start)

        chunks.append(Chunk(text[start : end + 1], start))
        start = end + 1

    logger.debug(f"Split {len(text)} chars into {len(chunks)} chunk(s)")
    return chunks


def split_text_strings(text: str, config: Optional[SplitConfig] = None) -> List[str]:
    """Split text and return only the chunk strings."""
    return [chunk.text for chunk in split_text(text, config)]


__all__ = [
    "DEFAULT_MAX_LENGTH",
    "DEFAULT_PUNCTUATION",
    "EXTRA_SPACE_CHARACTERS",
    "Chunk",
    "SplitConfig",
    "is_break_point",
    "last_break_point",
    "split_text",
    "split_text_strings",
]
