"""Evaluation of a segmentation against ground-truth segments.

The ground truth has one segment per line in the following format::

    T<segment-id> <type> <segment-start> <segment-end> <segment-text>

where start and end are the character indices of the first and past the last
character of the segment in the entire text. Lines with other identifiers
are ignored. For every automatically found segment, the evaluator counts
whether it overlaps with none, exactly one, or multiple ground-truth
segments.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence

import pandas as pd

from .config import EvaluationConfig
from .exceptions import InputAccessError, MalformedRecordError
from .models import OverlapCounts, Segment

logger = logging.getLogger(__name__)


def segments_overlap(a: Segment, b: Segment) -> bool:
    """Whether the half-open intervals of two segments overlap."""
    if a.start < b.start:
        return b.start < a.end
    return a.start < b.end


def count_overlaps(
    automatic: Iterable[Segment], ground_truth: Sequence[Segment]
) -> OverlapCounts:
    """Bucket automatic segments by their number of overlapping ground-truth segments."""
    counts = OverlapCounts()
    for segment in automatic:
        counts.add(sum(1 for truth in ground_truth if segments_overlap(segment, truth)))
    return counts


def parse_ground_truth(lines: Iterable[str], id_prefix: str = "T") -> list[Segment]:
    """Parse ground-truth segments from annotation lines.

    Raises:
        MalformedRecordError: If a segment line lacks fields or has
            non-numeric offsets
    """
    segments = []
    for line_number, line in enumerate(lines, 1):
        line = line.rstrip("\r\n")
        if not line:
            continue
        parts = line.split(maxsplit=4)
        if not parts or not parts[0].startswith(id_prefix):
            continue
        if len(parts) < 5:
            raise MalformedRecordError(
                f"expected 5 whitespace-separated fields, got {len(parts)}", line_number
            )
        try:
            start, end = int(parts[2]), int(parts[3])
        except ValueError:
            raise MalformedRecordError(
                f"non-numeric offsets {parts[2]!r}, {parts[3]!r}", line_number
            ) from None
        segments.append(Segment(parts[4], start, end))
    return segments


@dataclass
class EvaluationReport:
    """Overlap counts per evaluated file and in total.

    ``skipped`` maps the files left out of the counts to the reason.
    """

    per_file: dict[str, OverlapCounts] = field(default_factory=dict)
    total: OverlapCounts = field(default_factory=OverlapCounts)
    skipped: dict[str, str] = field(default_factory=dict)

    def add(self, name: str, counts: OverlapCounts) -> None:
        self.per_file[name] = counts
        self.total += counts

    def to_frame(self) -> pd.DataFrame:
        """Per-file counts as a table."""
        rows = [
            {
                "file": name,
                "no_overlap": counts.no_overlap,
                "one_overlap": counts.single_overlap,
                "multi_overlap": counts.multi_overlap,
                "segments": counts.total,
            }
            for name, counts in self.per_file.items()
        ]
        return pd.DataFrame(
            rows, columns=["file", "no_overlap", "one_overlap", "multi_overlap", "segments"]
        )


class SegmentationEvaluator:
    """Compares segment files with ground-truth annotation files."""

    def __init__(self, config: Optional[EvaluationConfig] = None):
        self.config = config or EvaluationConfig()
        self._suffix = re.compile(re.escape(self.config.segments_extension) + "$")

    def ground_truth_name(self, segments_name: str) -> str:
        """Name of the ground-truth file belonging to a segments file."""
        return self._suffix.sub(self.config.ground_truth_extension, segments_name)

    def read_ground_truth(self, path: Path) -> list[Segment]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                return parse_ground_truth(f, self.config.ground_truth_id_prefix)
        except (OSError, UnicodeDecodeError) as e:
            raise InputAccessError(f"Cannot read ground truth from {path}: {e}") from e

    def evaluate_pair(self, segments_file: Path, ground_truth_file: Path) -> OverlapCounts:
        """Count overlaps between one segments file and its ground truth."""
        ground_truth = self.read_ground_truth(ground_truth_file)
        return count_overlaps(Segment.read(segments_file), ground_truth)

    def evaluate_directories(
        self, segments_dir: Path, ground_truth_dir: Path
    ) -> EvaluationReport:
        """Evaluate every file of ``segments_dir`` against ``ground_truth_dir``.

        Files that cannot be read or parsed are logged and listed in the
        report as skipped.
        """
        if not segments_dir.is_dir():
            raise InputAccessError(f"Segments directory not found: {segments_dir}")

        report = EvaluationReport()
        for segments_file in sorted(p for p in segments_dir.iterdir() if p.is_file()):
            ground_truth_file = ground_truth_dir / self.ground_truth_name(segments_file.name)
            try:
                counts = self.evaluate_pair(segments_file, ground_truth_file)
            except (InputAccessError, MalformedRecordError) as e:
                logger.error("Skipping %s: %s", segments_file.name, e)
                report.skipped[segments_file.name] = str(e)
                continue
            report.add(segments_file.name, counts)
        return report
