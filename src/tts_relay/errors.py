"""Error types raised by the text splitter and the synthesis client."""

from __future__ import annotations

from typing import Any


class TTSError(Exception):
    """Base class for every failure surfaced by the relay.

    ``status_code`` is the HTTP status the router reports for the failure and
    ``detail`` is the human-readable diagnostic.
    """

    status_code: int = 500

    def __init__(self, detail: Any, *, status_code: int | None = None):
        super().__init__(str(detail))
        self.detail = detail
        if status_code is not None:
            self.status_code = status_code


class InvalidInputError(TTSError, ValueError):
    """A required field is empty or an option has the wrong type or range."""

    status_code = 422


class TextTooLongError(TTSError):
    """Text handed to the single-request entry point exceeds the remote limit."""

    status_code = 413

    def __init__(self, length: int, limit: int):
        super().__init__(
            f"text length ({length}) should be less than or equal to {limit} "
            "characters. Try the long-text entry point for long text."
        )
        self.length = length
        self.limit = limit


class SegmentationError(TTSError):
    """A run of text has no break point inside the length window."""

    status_code = 422

    def __init__(self, fragment: str, offset: int):
        super().__init__(
            "The word is too long to split into a short text:\n"
            f"{fragment} ...\n\n"
            'Try the option "split_punct" to split the text by punctuation.'
        )
        self.fragment = fragment
        self.offset = offset


class TransportError(TTSError):
    """The remote endpoint could not be reached or answered with an error."""

    status_code = 502


class UnsupportedLanguageError(TTSError):
    """The endpoint returned no audio for the requested language."""

    status_code = 400

    def __init__(self, lang: str):
        super().__init__(f'lang "{lang}" might not exist')
        self.lang = lang


class ResponseParseError(TTSError):
    """The response body does not have the expected nested-JSON shape."""

    status_code = 502


__all__ = [
    "InvalidInputError",
    "ResponseParseError",
    "SegmentationError",
    "TTSError",
    "TextTooLongError",
    "TransportError",
    "UnsupportedLanguageError",
]
