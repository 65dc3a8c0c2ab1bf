"""Parser engines."""

from .base import ParserEngine, SynchronizedEngine
from .benepar_engine import BeneparEngine

__all__ = ["ParserEngine", "SynchronizedEngine", "BeneparEngine", "create_engine"]


def create_engine(config) -> ParserEngine:
    """Create the engine named in an ``EngineConfig``."""
    if config.name == "benepar":
        return BeneparEngine(
            language=config.language,
            spacy_models=config.spacy_models,
            parser_models=config.parser_models,
        )
    raise ValueError(f"Unknown engine: {config.name}")
