"""Splitting of documents into paragraphs and sentences."""

import re

from .engines.base import ParserEngine
from .models import Segment

PARAGRAPH_SEPARATOR = "\n\n"


def split_paragraphs(document: Segment, separator: str = PARAGRAPH_SEPARATOR) -> list[Segment]:
    """Split a document at blank lines.

    Every run of text between two separators becomes a paragraph, even an
    empty one, as does the text after the last separator unless it is
    empty. Paragraphs are not trimmed.

    Args:
        document: The document text
        separator: Paragraph separator

    Returns:
        Paragraph segments with offsets in the document's text
    """
    paragraphs = []
    start = 0
    for match in re.finditer(re.escape(separator), document.text):
        paragraphs.append(Segment.from_segment(document, start, match.start()))
        start = match.end()
    if start < len(document.text):
        paragraphs.append(Segment.from_segment(document, start, len(document.text)))
    return paragraphs


def split_sentences(paragraph: Segment, engine: ParserEngine) -> list[Segment]:
    """Split a paragraph into sentences using the engine's sentence boundaries.

    Each sentence reaches from the end of the previous sentence to the end
    of its last token and is trimmed of surrounding whitespace.
    """
    tokens = engine.tokenize(paragraph.text)
    sentences = []
    start = 0
    for sentence_tokens in engine.split_sentences(tokens):
        if not sentence_tokens:
            continue
        end = sentence_tokens[-1].end_offset
        sentences.append(Segment.from_segment(paragraph, start, end, trim=True))
        start = end
    return sentences
