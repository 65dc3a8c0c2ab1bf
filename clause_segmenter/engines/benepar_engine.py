"""spaCy + benepar engine (tokenizer, sentence splitter and constituency parser)."""

import logging
from typing import Optional, Sequence

import spacy
from spacy.language import Language
from spacy.tokens import Doc

from ..exceptions import ModelUnavailableError
from ..models import Token
from ..tokens import build_tokens
from ..tree import ConstituencyTree
from .base import ParserEngine

logger = logging.getLogger(__name__)

SPACY_MODEL_CANDIDATES = {
    "en": ["en_core_web_sm", "en_core_web_md", "en_core_web_lg"],
    "de": ["de_core_news_sm", "de_core_news_md", "de_core_news_lg"],
    "fr": ["fr_core_news_sm", "fr_core_news_md", "fr_core_news_lg"],
    "zh": ["zh_core_web_sm", "zh_core_web_md", "zh_core_web_lg"],
}

BENEPAR_MODEL_CANDIDATES = {
    "en": ["benepar_en3", "benepar_en3_large"],
    "de": ["benepar_de2"],
    "fr": ["benepar_fr2"],
    "zh": ["benepar_zh2"],
    "ar": ["benepar_ar2"],
    "eu": ["benepar_eu2"],
    "he": ["benepar_he2"],
    "hu": ["benepar_hu2"],
    "ko": ["benepar_ko2"],
    "pl": ["benepar_pl2"],
    "sv": ["benepar_sv2"],
}


class BeneparEngine(ParserEngine):
    """Engine using spaCy for tokens and sentences and benepar for trees."""

    def __init__(
        self,
        language: str = "en",
        spacy_models: Optional[list[str]] = None,
        parser_models: Optional[list[str]] = None,
    ):
        """Initialize benepar engine.

        Args:
            language: Language code of the texts to process
            spacy_models: spaCy pipelines to try in order (default per language)
            parser_models: benepar models to try in order (default per language)
        """
        super().__init__(language)
        self.spacy_models = spacy_models or SPACY_MODEL_CANDIDATES.get(language, [])
        self.parser_models = parser_models or BENEPAR_MODEL_CANDIDATES.get(language, [])
        self._nlp: Optional[Language] = None
        self._parser = None

    def _load(self) -> None:
        self._nlp = self._load_spacy()
        self._parser = self._load_parser()

    def _load_spacy(self) -> Language:
        for name in self.spacy_models:
            try:
                # Sentence boundaries need the parser; entities are not used.
                nlp = spacy.load(name, exclude=["ner"])
                logger.info("Loaded spaCy pipeline %s", name)
                return nlp
            except OSError:  # model not installed locally
                logger.debug("spaCy pipeline %s not available", name)
                continue

        # A blank pipeline with a sentencizer still tokenizes and splits
        # sentences, only with punctuation-based boundaries.
        try:
            nlp = spacy.blank(self.language)
        except ImportError as e:
            raise ModelUnavailableError(
                f"No spaCy language support for language {self.language!r}"
            ) from e
        if "sentencizer" not in nlp.pipe_names:
            nlp.add_pipe("sentencizer")
        logger.warning(
            "No spaCy pipeline installed for %r, using a blank pipeline with sentencizer",
            self.language,
        )
        return nlp

    def _load_parser(self):
        if not self.parser_models:
            raise ModelUnavailableError(f"No parser model known for language {self.language!r}")

        import benepar

        for name in self.parser_models:
            try:
                parser = benepar.Parser(name)
                logger.info("Loaded benepar model %s", name)
                return parser
            except (LookupError, OSError, ValueError):  # model not downloaded
                logger.debug("benepar model %s not available", name)
                continue
        raise ModelUnavailableError(
            f"No parser model found for language {self.language!r} "
            f"(tried {', '.join(self.parser_models)})"
        )

    def tokenize(self, text: str) -> list[Token]:
        self.load()
        doc = self._nlp.make_doc(text)
        spans = [(t.idx, t.idx + len(t.text)) for t in doc if not t.is_space]
        return build_tokens(text, spans)

    def split_sentences(self, tokens: Sequence[Token]) -> list[list[Token]]:
        self.load()
        tokens = list(tokens)
        if not tokens:
            return []
        doc = Doc(
            self._nlp.vocab,
            words=[t.original_text for t in tokens],
            spaces=[bool(t.after) for t in tokens],
        )
        doc = self._nlp(doc)
        if not doc.has_annotation("SENT_START"):
            return [tokens]
        return [tokens[sent.start : sent.end] for sent in doc.sents]

    def parse(self, tokens: Sequence[Token]) -> ConstituencyTree:
        self.load()
        labels = [t.value for t in tokens]
        tree = ConstituencyTree.from_nltk(self._parser.parse(labels))
        tree.relabel_leaves(labels)
        return tree
