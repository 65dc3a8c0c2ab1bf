"""Base classes for parser engines."""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..models import Token
from ..tree import ConstituencyTree

logger = logging.getLogger(__name__)


class ParserEngine(ABC):
    """Base class for the NLP engines that tokenize, split and parse text.

    Loading the underlying models is expensive and happens once, in
    ``load()``. Engines are not safe for concurrent use; share one through
    ``SynchronizedEngine`` or give every worker its own engine.
    """

    def __init__(self, language: str = "en"):
        """Initialize parser engine.

        Args:
            language: Language code of the texts to process
        """
        self.language = language
        self._load_lock = threading.Lock()
        self._loaded = False
        self._load_error: Optional[Exception] = None

    def load(self) -> None:
        """Load the models of this engine unless already loaded.

        A failed load is not retried; its error is raised again instead.
        """
        with self._load_lock:
            if self._load_error is not None:
                raise self._load_error
            if self._loaded:
                return
            try:
                self._load()
            except Exception as e:
                self._load_error = e
                raise
            self._loaded = True
            logger.debug("Loaded %s for language %r", self.__class__.__name__, self.language)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @abstractmethod
    def _load(self) -> None:
        """Load the models of this engine."""
        pass

    @abstractmethod
    def tokenize(self, text: str) -> list[Token]:
        """Tokenize text.

        Args:
            text: Input text

        Returns:
            Non-whitespace tokens with offsets relative to ``text``
        """
        pass

    @abstractmethod
    def split_sentences(self, tokens: Sequence[Token]) -> list[list[Token]]:
        """Group consecutive tokens into sentences."""
        pass

    @abstractmethod
    def parse(self, tokens: Sequence[Token]) -> ConstituencyTree:
        """Parse the constituency tree of one sentence.

        Args:
            tokens: Tokens of the sentence

        Returns:
            Tree with exactly one leaf per token
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(language={self.language!r})"


class SynchronizedEngine(ParserEngine):
    """Serializes all calls to a wrapped engine through one lock."""

    def __init__(self, engine: ParserEngine):
        super().__init__(engine.language)
        self.engine = engine
        self._call_lock = threading.RLock()

    def _load(self) -> None:
        with self._call_lock:
            self.engine.load()

    def tokenize(self, text: str) -> list[Token]:
        with self._call_lock:
            return self.engine.tokenize(text)

    def split_sentences(self, tokens: Sequence[Token]) -> list[list[Token]]:
        with self._call_lock:
            return self.engine.split_sentences(tokens)

    def parse(self, tokens: Sequence[Token]) -> ConstituencyTree:
        with self._call_lock:
            return self.engine.parse(tokens)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.engine!r})"
