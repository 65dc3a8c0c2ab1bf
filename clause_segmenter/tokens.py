"""Construction of invertible tokens from tokenizer character spans."""

from typing import Iterable

from .models import Token

# Penn Treebank escapes for brackets and typographic quotes
PTB_ESCAPES = {
    "(": "-LRB-",
    ")": "-RRB-",
    "[": "-LSB-",
    "]": "-RSB-",
    "{": "-LCB-",
    "}": "-RCB-",
    "“": "``",  # left double quotation mark
    "”": "''",  # right double quotation mark
    "„": "``",  # double low-9 quotation mark
    "‘": "`",  # left single quotation mark
    "’": "'",  # right single quotation mark
}

OPENING_QUOTE = "``"
CLOSING_QUOTE = "''"
STRAIGHT_QUOTE = '"'

OPENING_BRACKETS = {"(", "[", "{"}


def ptb_label(text: str, preceding: str = "") -> str:
    """Return the canonical Penn Treebank label of a token.

    Args:
        text: Token text
        preceding: Character directly before the token ("" at text start)

    Returns:
        Escaped label; a straight double quote becomes an opening quote at
        the start of the text or after whitespace or an opening bracket,
        otherwise a closing quote
    """
    if text == STRAIGHT_QUOTE:
        if not preceding or preceding.isspace() or preceding in OPENING_BRACKETS:
            return OPENING_QUOTE
        return CLOSING_QUOTE
    return PTB_ESCAPES.get(text, text)


def build_tokens(text: str, spans: Iterable[tuple[int, int]]) -> list[Token]:
    """Build invertible tokens for non-whitespace character spans of ``text``.

    The whitespace between two spans becomes the ``after`` of the first
    token and the ``before`` of the second one. Leading whitespace of the
    text is the ``before`` of the first token and trailing whitespace the
    ``after`` of the last one.

    Args:
        text: Tokenized text
        spans: Ascending, non-overlapping ``(start, end)`` character spans

    Returns:
        Tokens with offsets relative to ``text``
    """
    spans = list(spans)
    tokens = []
    for i, (start, end) in enumerate(spans):
        previous_end = spans[i - 1][1] if i > 0 else 0
        next_start = spans[i + 1][0] if i + 1 < len(spans) else len(text)
        tokens.append(
            Token(
                original_text=text[start:end],
                before=text[previous_end:start],
                after=text[end:next_start],
                start_offset=start,
                label=ptb_label(text[start:end], text[start - 1] if start > 0 else ""),
            )
        )
    return tokens
