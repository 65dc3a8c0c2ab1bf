"""Data models for the clause segmentation pipeline."""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from .exceptions import InputAccessError, MalformedRecordError


@dataclass(frozen=True)
class Segment:
    """A piece of text together with its position in the whole text.

    ``start`` is the index of the first character of the segment in the
    complete text and ``end`` the index past its last character.
    """

    text: str
    start: int
    end: int

    @classmethod
    def from_text(cls, text: str) -> "Segment":
        """Create a segment that spans the entire text."""
        return cls(text, 0, len(text))

    @classmethod
    def from_complete_text(cls, complete_text: str, start: int, end: int) -> "Segment":
        """Create a segment for ``complete_text[start:end]``.

        Raises:
            IndexError: If the indices are outside of the text or inverted
        """
        if not 0 <= start <= end <= len(complete_text):
            raise IndexError(
                f"Segment [{start}, {end}) out of range for text of length {len(complete_text)}"
            )
        return cls(complete_text[start:end], start, end)

    @classmethod
    def from_segment(
        cls, parent: "Segment", start: int, end: int, trim: bool = False
    ) -> "Segment":
        """Create a sub-segment of ``parent``.

        Args:
            parent: Segment of which the new segment is a part
            start: Index of the first character relative to the parent text
            end: Index past the last character relative to the parent text
            trim: Whether to strip whitespace at the borders of the new segment

        Returns:
            Segment with offsets in the same text as the parent's offsets

        Raises:
            IndexError: If the indices are outside of the parent text
            ValueError: If trimming inverts the range
        """
        if not 0 <= start <= len(parent.text) or not 0 <= end <= len(parent.text):
            raise IndexError(
                f"Segment [{start}, {end}) out of range for parent of length {len(parent.text)}"
            )
        if trim:
            start = _trim_start(parent.text, start)
            end = _trim_end(parent.text, end)
        if start > end:
            raise ValueError(f"Inverted segment range [{start}, {end})")
        return cls(parent.text[start:end], parent.start + start, parent.start + end)

    def __str__(self) -> str:
        return f"{self.start}\t{self.end}\t{self.text.replace(chr(10), ' ')}"

    @classmethod
    def parse(cls, lines: Iterable[str]) -> list["Segment"]:
        """Parse segments serialized with ``str(segment)``, one per line.

        Line breaks inside segment texts are replaced by spaces on
        serialization, so parsed texts may differ from the original ones.

        Raises:
            MalformedRecordError: If a line is not a serialized segment
        """
        segments = []
        for line_number, line in enumerate(lines, 1):
            line = line.rstrip("\r\n")
            if not line:
                continue
            parts = line.split("\t", 2)
            if len(parts) < 3:
                raise MalformedRecordError(
                    f"expected 3 tab-separated fields, got {len(parts)}", line_number
                )
            try:
                start, end = int(parts[0]), int(parts[1])
            except ValueError:
                raise MalformedRecordError(
                    f"non-numeric offsets {parts[0]!r}, {parts[1]!r}", line_number
                ) from None
            segments.append(cls(parts[2], start, end))
        return segments

    @classmethod
    def read(cls, path: Path) -> list["Segment"]:
        """Parse all segments of a file written with print-interval enabled."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                return cls.parse(f)
        except (OSError, UnicodeDecodeError) as e:
            raise InputAccessError(f"Cannot read segments from {path}: {e}") from e


def _trim_start(text: str, start: int) -> int:
    while start < len(text) and text[start].isspace():
        start += 1
    return start


def _trim_end(text: str, end: int) -> int:
    while end > 0 and text[end - 1].isspace():
        end -= 1
    return end


@dataclass(frozen=True)
class Token:
    """A single lexical atom and the whitespace around it.

    Tokens are invertible: ``before`` of a token equals ``after`` of the
    previous token, so concatenating ``before + original_text`` over all
    tokens reproduces the tokenized text up to trailing whitespace.
    """

    original_text: str
    before: str
    after: str
    start_offset: int
    label: Optional[str] = None  # canonical (PTB) form of the token

    @property
    def end_offset(self) -> int:
        return self.start_offset + len(self.original_text)

    @property
    def value(self) -> str:
        return self.label if self.label is not None else self.original_text


@dataclass
class OverlapCounts:
    """Number of automatic segments overlapping none, one, or several ground-truth segments."""

    no_overlap: int = 0
    single_overlap: int = 0
    multi_overlap: int = 0

    def add(self, overlaps: int) -> None:
        if overlaps == 0:
            self.no_overlap += 1
        elif overlaps == 1:
            self.single_overlap += 1
        else:
            self.multi_overlap += 1

    def __iadd__(self, other: "OverlapCounts") -> "OverlapCounts":
        self.no_overlap += other.no_overlap
        self.single_overlap += other.single_overlap
        self.multi_overlap += other.multi_overlap
        return self

    @property
    def total(self) -> int:
        return self.no_overlap + self.single_overlap + self.multi_overlap

    def __str__(self) -> str:
        return f"{self.no_overlap}\t{self.single_overlap}\t{self.multi_overlap}"
