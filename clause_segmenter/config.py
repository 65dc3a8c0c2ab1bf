"""Configuration management for the clause segmentation pipeline."""

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class EngineConfig(BaseModel):
    """Configuration for the parser engine."""

    name: Literal["benepar"] = "benepar"
    language: str = "en"
    spacy_models: Optional[list[str]] = Field(
        default=None, description="spaCy pipelines to try in order (default per language)"
    )
    parser_models: Optional[list[str]] = Field(
        default=None, description="Parser models to try in order (default per language)"
    )


class SegmentationConfig(BaseModel):
    """Configuration for segmentation and its output."""

    print_interval: bool = Field(
        default=True, description="Write start and end offsets before each segment text"
    )
    extension: str = ".txt"
    paragraph_separator: str = "\n\n"
    workers: int = Field(default=1, ge=1)
    worker_mode: Literal["process", "thread"] = "process"

    @field_validator("paragraph_separator")
    @classmethod
    def non_empty_separator(cls, v: str) -> str:
        """Reject an empty paragraph separator."""
        if not v:
            raise ValueError("paragraph_separator must not be empty")
        return v


class EvaluationConfig(BaseModel):
    """Configuration for comparing segments with ground truth."""

    segments_extension: str = ".txt"
    ground_truth_extension: str = ".ann"
    ground_truth_id_prefix: str = "T"


class Config(BaseModel):
    """Main configuration for the clause segmentation pipeline."""

    input_path: Optional[Path] = None
    output_path: Optional[Path] = None
    engine: EngineConfig = Field(default_factory=EngineConfig)
    segmentation: SegmentationConfig = Field(default_factory=SegmentationConfig)
    evaluation: EvaluationConfig = Field(default_factory=EvaluationConfig)

    @field_validator("input_path", "output_path", mode="before")
    @classmethod
    def convert_to_path(cls, v):
        """Convert string to Path."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load configuration from a YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls(**data)

    def to_yaml(self, path: str | Path) -> None:
        """Save configuration to a YAML file."""
        data = self.model_dump(mode="json")
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False)
