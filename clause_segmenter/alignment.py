"""Alignment of clause boundaries with the word grid of a sentence."""

from collections import deque
from typing import Sequence

from .models import Segment, Token


def clause_boundary_offsets(
    leaf_start: int, tokens: Sequence[Token], boundaries: Sequence[bool]
) -> deque[int]:
    """Convert per-leaf boundary flags into character offsets.

    Args:
        leaf_start: Absolute offset of the first leaf of the sentence
        tokens: Tokens of the sentence, one per leaf
        boundaries: Clause boundary flag per leaf

    Returns:
        Ascending absolute offsets at which a clause ends
    """
    offsets: deque[int] = deque()
    clause_end = leaf_start
    for token, is_boundary in zip(tokens, boundaries):
        clause_end += len(token.before) + len(token.original_text)
        if is_boundary:
            offsets.append(clause_end)
    return offsets


def align_segments(
    sentence: Segment, words: Sequence[Segment], clause_ends: Sequence[int]
) -> list[Segment]:
    """Cut a sentence into segments at the words where clauses end.

    A segment is closed before the first word that starts at or after the
    next clause end. Clause ends that the same word passes are collapsed
    into one cut, so no empty segments are produced.

    Args:
        sentence: The sentence segment
        words: Words of the sentence, in order
        clause_ends: Ascending absolute clause end offsets

    Returns:
        Trimmed, ordered and non-overlapping segments of the sentence
    """
    segments = []
    pending = deque(clause_ends)
    segment_start = sentence.start
    for previous, word in zip(words, words[1:]):
        if not pending:
            break
        if word.start < pending[0]:
            continue
        segments.append(
            Segment.from_segment(
                sentence,
                segment_start - sentence.start,
                previous.end - sentence.start,
                trim=True,
            )
        )
        pending.popleft()
        while pending and word.start >= pending[0]:
            pending.popleft()
        segment_start = word.start

    segments.append(
        Segment.from_segment(
            sentence, segment_start - sentence.start, len(sentence.text), trim=True
        )
    )
    return segments
