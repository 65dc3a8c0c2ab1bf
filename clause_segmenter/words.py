"""Merging of tokens into words, the alignment grid for clause segmentation."""

import re
from typing import Optional, Sequence

from .models import Segment, Token

OPENING_BRACKET_LABEL = re.compile(r"-L.B-")
OPEN_BRACKET_END = re.compile(r".*[(\[{]", re.DOTALL)
LONE_QUOTE = re.compile(r"[\"']")


def is_complete_word(word: str) -> bool:
    """Whether ``word`` can be closed before a following word start.

    Words ending with an opening bracket and lone quote characters wait for
    the token they open.
    """
    if OPEN_BRACKET_END.fullmatch(word):
        return False
    if LONE_QUOTE.fullmatch(word):
        return False
    return True


def is_word_start(token: Token) -> bool:
    """Whether ``token`` starts a new word (alphanumeric or opening bracket)."""
    value = token.value
    if value and value[0].isalnum():
        return True
    return OPENING_BRACKET_LABEL.fullmatch(value) is not None


def merge_words(sentence: Segment, tokens: Sequence[Token]) -> list[Segment]:
    """Merge the tokens of a sentence into words.

    A token that is directly followed by another token (no whitespace in
    between) is merged with it unless the text merged so far is a complete
    word and the following token starts a new word. Punctuation thus sticks
    to the preceding word and opening brackets to the following one.

    Args:
        sentence: The sentence the tokens were produced from
        tokens: Tokens with offsets relative to the sentence text

    Returns:
        Words as trimmed sub-segments of the sentence, in order
    """
    words = []
    word_start = 0
    pending: Optional[list[str]] = None  # text of the open word

    def close() -> None:
        word_end = word_start + sum(len(part) for part in pending)
        words.append(Segment.from_segment(sentence, word_start, word_end, trim=True))

    for token in tokens:
        if pending is not None and not (
            is_complete_word("".join(pending)) and is_word_start(token)
        ):
            pending.extend((token.before, token.original_text))
        else:
            if pending is not None:
                close()
            word_start = token.start_offset
            pending = [token.original_text]

        if token.after:
            close()
            pending = None

    if pending is not None:
        close()
    return words
