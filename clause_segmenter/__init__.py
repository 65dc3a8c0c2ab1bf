"""Clause segmenter - Split texts into clause-level segments."""

__version__ = "0.1.0"

from .config import Config, EngineConfig, EvaluationConfig, SegmentationConfig
from .engines import BeneparEngine, ParserEngine
from .evaluation import EvaluationReport, SegmentationEvaluator
from .models import OverlapCounts, Segment, Token
from .pipeline import SegmentationPipeline
from .segmenter import ClauseSegmenter

__all__ = [
    "ClauseSegmenter",
    "SegmentationPipeline",
    "ParserEngine",
    "BeneparEngine",
    "SegmentationEvaluator",
    "EvaluationReport",
    "Config",
    "EngineConfig",
    "SegmentationConfig",
    "EvaluationConfig",
    "Segment",
    "Token",
    "OverlapCounts",
]
