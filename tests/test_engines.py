"""Tests for parser engine loading and sharing."""

import threading

import pytest
from nltk import Tree

from clause_segmenter.config import EngineConfig
from clause_segmenter.engines import BeneparEngine, SynchronizedEngine, create_engine
from clause_segmenter.exceptions import ModelUnavailableError
from clause_segmenter.models import Segment
from clause_segmenter.segmenter import ClauseSegmenter
from clause_segmenter.splitter import split_sentences
from clause_segmenter.words import merge_words
from conftest import FakeEngine


def test_load_happens_once():
    engine = FakeEngine()
    threads = [threading.Thread(target=engine.load) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    engine.load()
    assert engine.load_calls == 1
    assert engine.is_loaded


def test_failed_load_is_not_retried():
    class FailingEngine(FakeEngine):
        def _load(self):
            super()._load()
            raise ModelUnavailableError("no model")

    engine = FailingEngine()
    with pytest.raises(ModelUnavailableError):
        engine.load()
    with pytest.raises(ModelUnavailableError):
        engine.load()
    assert engine.load_calls == 1
    assert not engine.is_loaded


def test_synchronized_engine_delegates(fake_engine):
    engine = SynchronizedEngine(fake_engine)
    engine.load()
    assert fake_engine.load_calls == 1

    tokens = engine.tokenize("The man who came left.")
    assert [t.original_text for t in tokens] == ["The", "man", "who", "came", "left", "."]
    assert engine.split_sentences(tokens) == [tokens]
    assert engine.parse(tokens).num_leaves == 6
    assert fake_engine.parsed == ["The man who came left ."]


def test_synchronized_engine_from_threads(fake_engine):
    engine = SynchronizedEngine(fake_engine)
    results = []

    def work():
        tokens = engine.tokenize("I think it works, but we will see.")
        results.append(engine.parse(tokens).num_leaves)

    threads = [threading.Thread(target=work) for _ in range(6)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert results == [10] * 6


def test_create_engine():
    engine = create_engine(EngineConfig(language="de"))
    assert isinstance(engine, BeneparEngine)
    assert engine.language == "de"
    assert engine.parser_models == ["benepar_de2"]
    assert not engine.is_loaded


def test_create_engine_model_overrides():
    engine = create_engine(EngineConfig(spacy_models=["custom_sm"], parser_models=["custom_parser"]))
    assert engine.spacy_models == ["custom_sm"]
    assert engine.parser_models == ["custom_parser"]


def test_unknown_language_has_no_parser_model():
    engine = BeneparEngine(language="xx", spacy_models=[])
    with pytest.raises(ModelUnavailableError):
        engine.load()
    # raised again without another attempt
    with pytest.raises(ModelUnavailableError):
        engine.tokenize("text")


class RecordingParser:
    """Stands in for a benepar parser; returns a flat tree of lowercased leaves."""

    def __init__(self):
        self.calls = []

    def parse(self, words):
        self.calls.append(list(words))
        return Tree("S", [Tree("X", [word.lower()]) for word in words])


TEXT = 'He said "we  won."\nThen (they) left. Really?'


class TestBlankPipelineEngine:
    """BeneparEngine on a blank spaCy pipeline, which needs no downloaded model."""

    @pytest.fixture
    def engine(self, monkeypatch):
        engine = BeneparEngine("en", spacy_models=["no_such_pipeline"])
        parser = RecordingParser()
        monkeypatch.setattr(engine, "_load_parser", lambda: parser)
        engine.load()
        engine.recording_parser = parser
        return engine

    def test_tokenize_drops_whitespace(self, engine):
        tokens = engine.tokenize(TEXT)
        assert [t.original_text for t in tokens] == [
            "He", "said", '"', "we", "won", ".",
            "Then", "(", "they", ")", "left", ".", "Really", "?",
        ]
        assert [t.start_offset for t in tokens[:6]] == [0, 3, 8, 9, 13, 16]
        for token in tokens:
            assert TEXT[token.start_offset : token.end_offset] == token.original_text

    def test_tokens_are_invertible(self, engine):
        tokens = engine.tokenize(TEXT)
        assert tokens[3].after == "  "
        assert tokens[4].before == "  "
        assert tokens[5].after == "\n"
        assert tokens[6].before == "\n"
        assert "".join(t.before + t.original_text for t in tokens) == TEXT

    def test_tokens_carry_treebank_labels(self, engine):
        labels = [t.value for t in engine.tokenize(TEXT)]
        assert labels[2] == "``"
        assert labels[7] == "-LRB-"
        assert labels[9] == "-RRB-"

    def test_split_sentences(self, engine):
        tokens = engine.tokenize(TEXT)
        sentences = engine.split_sentences(tokens)
        assert [[t.original_text for t in s] for s in sentences] == [
            ["He", "said", '"', "we", "won", "."],
            ["Then", "(", "they", ")", "left", "."],
            ["Really", "?"],
        ]
        assert engine.split_sentences([]) == []

    def test_parse_restores_token_labels(self, engine):
        tokens = engine.tokenize("Then (they) left.")
        tree = engine.parse(tokens)
        assert engine.recording_parser.calls == [["Then", "-LRB-", "they", "-RRB-", "left", "."]]
        assert [tree.leaf_label(i) for i in range(tree.num_leaves)] == [
            "Then", "-LRB-", "they", "-RRB-", "left", "."
        ]

    def test_sentences_and_words(self, engine):
        paragraph = Segment.from_text(TEXT)
        sentences = split_sentences(paragraph, engine)
        assert [(s.start, s.end) for s in sentences] == [(0, 17), (18, 35), (36, 43)]

        first = sentences[0]
        words = merge_words(first, engine.tokenize(first.text))
        assert [w.text for w in words] == ["He", "said", '"we', "won."]

    def test_segment_with_flat_trees(self, engine):
        segments = ClauseSegmenter(engine).segment(TEXT)
        assert [s.text for s in segments] == ['He said "we  won.', "Then (they) left.", "Really?"]
