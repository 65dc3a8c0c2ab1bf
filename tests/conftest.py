"""Shared fixtures: a deterministic engine that needs no downloaded models."""

import re
from typing import Optional, Sequence

import pytest

from clause_segmenter.engines.base import ParserEngine
from clause_segmenter.models import Token
from clause_segmenter.tokens import build_tokens
from clause_segmenter.tree import ConstituencyTree

TOKEN_PATTERN = re.compile(r"\w+|[^\w\s]")
SENTENCE_END = {".", "!", "?"}


class FakeEngine(ParserEngine):
    """Regex tokenizer, punctuation sentence splitter and canned parse trees.

    ``trees`` maps the space-joined token labels of a sentence to a
    bracketed tree; other sentences get a flat tree without clauses below
    the root ``S``.
    """

    def __init__(self, trees: Optional[dict[str, str]] = None, language: str = "en"):
        super().__init__(language)
        self.trees = trees or {}
        self.load_calls = 0
        self.parsed: list[str] = []

    def _load(self) -> None:
        self.load_calls += 1

    def tokenize(self, text: str) -> list[Token]:
        spans = [m.span() for m in TOKEN_PATTERN.finditer(text)]
        return build_tokens(text, spans)

    def split_sentences(self, tokens: Sequence[Token]) -> list[list[Token]]:
        sentences, current = [], []
        for token in tokens:
            current.append(token)
            if token.original_text in SENTENCE_END:
                sentences.append(current)
                current = []
        if current:
            sentences.append(current)
        return sentences

    def parse(self, tokens: Sequence[Token]) -> ConstituencyTree:
        key = " ".join(t.value for t in tokens)
        self.parsed.append(key)
        if key in self.trees:
            return ConstituencyTree.from_bracketed(self.trees[key])
        leaves = " ".join(f"(X {t.value})" for t in tokens)
        return ConstituencyTree.from_bracketed(f"(ROOT (S {leaves}))")


# "The man who came left."
RELATIVE_CLAUSE_TREE = (
    "(ROOT (S (NP (NP (DT The) (NN man)) (SBAR (WHNP (WP who)) (S (VP (VBD came)))))"
    " (VP (VBD left)) (. .)))"
)

# "He said `` we won ."
QUOTED_CLAUSE_TREE = (
    "(ROOT (S (NP (PRP He)) (VP (VBD said) (`` ``) (S (NP (PRP we)) (VP (VBD won)))) (. .)))"
)

# "I think it works, but we will see."
COORDINATED_TREE = (
    "(ROOT (S (S (NP (PRP I)) (VP (VBP think) (SBAR (S (NP (PRP it)) (VP (VBZ works))))))"
    " (, ,) (CC but) (S (NP (PRP we)) (VP (MD will) (VP (VB see)))) (. .)))"
)


CANNED_TREES = {
    "The man who came left .": RELATIVE_CLAUSE_TREE,
    "He said `` we won .": QUOTED_CLAUSE_TREE,
    "I think it works , but we will see .": COORDINATED_TREE,
}


@pytest.fixture
def fake_engine():
    return FakeEngine(CANNED_TREES)
