"""Exceptions raised by the clause segmenter."""

from typing import Optional


class SegmenterError(Exception):
    """Base class for all clause segmenter errors."""


class InputAccessError(SegmenterError, OSError):
    """A file or directory could not be read or written."""


class ModelUnavailableError(SegmenterError, RuntimeError):
    """No parsing model is available for the requested language."""


class MalformedRecordError(SegmenterError, ValueError):
    """A serialized segment or ground-truth line does not match its schema."""

    def __init__(self, message: str, line_number: Optional[int] = None):
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number
