"""Exception hierarchy for rush.

Every error raised on purpose by rush derives from :class:`RushError`.
The concrete classes also inherit from the matching built-in so that
callers catching ``ValueError`` / ``OSError`` keep working.
"""
from __future__ import annotations


class RushError(Exception):
    """Base error for rush."""


class InvalidArgumentError(RushError, ValueError):
    """Raised when a count, size or duration cannot describe a valid request."""


class MediaIOError(RushError, OSError):
    """Raised when decoding, encoding or writing a media file fails."""


class UnsupportedFormatError(RushError):
    """Raised for file extensions or sample formats rush cannot handle."""
