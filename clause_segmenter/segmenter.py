"""Clause segmentation of documents, paragraphs and sentences.

This segmentation algorithm starts a new segment at the beginning or end of
every clause not preceded by a relative pronoun. Clauses are identified with
a constituency parser and the clause tags of the Penn Treebank guidelines.

See Al-Khatib et al., "A News Editorial Corpus for Mining Argumentation
Strategies", COLING 2016.
"""

import logging
from typing import Union

from .alignment import align_segments, clause_boundary_offsets
from .boundaries import detect_clause_boundaries
from .engines.base import ParserEngine
from .models import Segment
from .splitter import PARAGRAPH_SEPARATOR, split_paragraphs, split_sentences
from .words import merge_words

logger = logging.getLogger(__name__)


class ClauseSegmenter:
    """Segments texts into clauses."""

    def __init__(self, engine: ParserEngine, paragraph_separator: str = PARAGRAPH_SEPARATOR):
        """Initialize clause segmenter.

        Args:
            engine: Engine for tokenization, sentence splitting and parsing
            paragraph_separator: Separator between paragraphs
        """
        self.engine = engine
        self.paragraph_separator = paragraph_separator

    def segment(self, text: Union[str, Segment]) -> list[Segment]:
        """Segment a whole text, paragraph by paragraph."""
        document = Segment.from_text(text) if isinstance(text, str) else text
        segments = []
        for paragraph in split_paragraphs(document, self.paragraph_separator):
            segments.extend(self.segment_paragraph(paragraph))
        return segments

    def segment_paragraph(self, paragraph: Segment) -> list[Segment]:
        """Segment a paragraph, sentence by sentence."""
        segments = []
        for sentence in split_sentences(paragraph, self.engine):
            segments.extend(self.segment_sentence(sentence))
        return segments

    def segment_sentence(self, sentence: Segment) -> list[Segment]:
        """Segment one sentence into clauses.

        Raises:
            ValueError: If the engine's tree does not have one leaf per token
        """
        tokens = self.engine.tokenize(sentence.text)
        if not tokens:
            return []

        words = merge_words(sentence, tokens)
        tree = self.engine.parse(tokens)
        if tree.num_leaves != len(tokens):
            raise ValueError(
                f"Parse tree has {tree.num_leaves} leaves for {len(tokens)} tokens: {sentence.text!r}"
            )

        boundaries = detect_clause_boundaries(tree)
        clause_ends = clause_boundary_offsets(sentence.start, tokens, boundaries)
        segments = align_segments(sentence, words, clause_ends)
        logger.debug("Sentence at %d: %d segments", sentence.start, len(segments))
        return segments
