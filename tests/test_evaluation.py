"""Tests for the segmentation evaluator."""

import pandas as pd
import pytest

from clause_segmenter.config import EvaluationConfig
from clause_segmenter.evaluation import (
    SegmentationEvaluator,
    count_overlaps,
    parse_ground_truth,
    segments_overlap,
)
from clause_segmenter.exceptions import InputAccessError, MalformedRecordError
from clause_segmenter.models import Segment


def seg(start, end):
    return Segment("x" * (end - start), start, end)


@pytest.mark.parametrize(
    "a,b,expected",
    [
        ((0, 10), (5, 8), True),
        ((5, 8), (0, 10), True),
        ((0, 5), (5, 9), False),
        ((5, 9), (0, 5), False),
        ((0, 5), (6, 9), False),
        ((3, 4), (3, 4), True),
    ],
)
def test_segments_overlap(a, b, expected):
    assert segments_overlap(seg(*a), seg(*b)) is expected


def test_count_overlaps_buckets():
    ground_truth = [seg(5, 8), seg(9, 12)]
    counts = count_overlaps([seg(0, 10)], ground_truth)
    assert (counts.no_overlap, counts.single_overlap, counts.multi_overlap) == (0, 0, 1)

    counts = count_overlaps([seg(0, 5)], [seg(6, 9)])
    assert (counts.no_overlap, counts.single_overlap, counts.multi_overlap) == (1, 0, 0)

    counts = count_overlaps([seg(0, 5), seg(6, 8), seg(8, 12)], ground_truth)
    assert str(counts) == "1\t2\t0"


def test_parse_ground_truth():
    lines = [
        "T1\tMajorClaim 0 12\tWe should go\n",
        "A1\tStance T1 For\n",
        "\n",
        "R1\tsupports Arg1:T2 Arg2:T1\n",
        "T2\tPremise 20 31\tit is   fun\n",
    ]
    assert parse_ground_truth(lines) == [
        Segment("We should go", 0, 12),
        Segment("it is   fun", 20, 31),
    ]


def test_parse_ground_truth_malformed():
    with pytest.raises(MalformedRecordError):
        parse_ground_truth(["T1\tClaim 0 12"])
    with pytest.raises(MalformedRecordError):
        parse_ground_truth(["T1\tClaim 0;4 12\ttext"])


def write(path, text):
    path.write_text(text, encoding="utf-8")
    return path


class TestEvaluator:
    """Tests for evaluating files and directories."""

    def test_ground_truth_name(self):
        evaluator = SegmentationEvaluator()
        assert evaluator.ground_truth_name("essay01.txt") == "essay01.ann"
        assert evaluator.ground_truth_name("a.txt.txt") == "a.txt.ann"
        assert evaluator.ground_truth_name("notes.md") == "notes.md"

    def test_evaluate_pair(self, tmp_path):
        segments = write(tmp_path / "e.txt", "0\t10\t0123456789\n20\t25\tabcde\n")
        truth = write(tmp_path / "e.ann", "T1\tClaim 5 8\tabc\nT2\tClaim 9 12\tdef\n")
        counts = SegmentationEvaluator().evaluate_pair(segments, truth)
        assert str(counts) == "1\t0\t1"

    def test_evaluate_pair_missing_ground_truth(self, tmp_path):
        segments = write(tmp_path / "e.txt", "0\t1\ta\n")
        with pytest.raises(InputAccessError):
            SegmentationEvaluator().evaluate_pair(segments, tmp_path / "e.ann")

    def test_evaluate_directories(self, tmp_path):
        segments_dir = tmp_path / "segments"
        truth_dir = tmp_path / "essays"
        segments_dir.mkdir()
        truth_dir.mkdir()
        write(segments_dir / "essay01.txt", "0\t10\tabcdefghij\n")
        write(truth_dir / "essay01.ann", "T1\tClaim 2 4\tcd\n")
        write(segments_dir / "essay02.txt", "0\t5\tabcde\n6\t9\tghi\n")
        write(truth_dir / "essay02.ann", "T1\tClaim 20 30\tabcdefghij\n")
        write(segments_dir / "essay03.txt", "0\t5\tabcde\n")  # no ground truth

        report = SegmentationEvaluator().evaluate_directories(segments_dir, truth_dir)

        assert list(report.per_file) == ["essay01.txt", "essay02.txt"]
        assert str(report.per_file["essay01.txt"]) == "0\t1\t0"
        assert str(report.per_file["essay02.txt"]) == "2\t0\t0"
        assert str(report.total) == "2\t1\t0"
        assert report.total.total == 3

        frame = report.to_frame()
        assert isinstance(frame, pd.DataFrame)
        assert frame["segments"].tolist() == [1, 2]
        assert list(report.skipped) == ["essay03.txt"]

    def test_malformed_ground_truth_is_reported_as_skipped(self, tmp_path):
        segments_dir = tmp_path / "segments"
        truth_dir = tmp_path / "essays"
        segments_dir.mkdir()
        truth_dir.mkdir()
        write(segments_dir / "essay01.txt", "0\t10\tabcdefghij\n")
        write(truth_dir / "essay01.ann", "T1\tClaim 2 4\tcd\n")
        write(segments_dir / "essay02.txt", "0\t5\tabcde\n")
        write(truth_dir / "essay02.ann", "T1\tClaim two 4\tcd\n")

        report = SegmentationEvaluator().evaluate_directories(segments_dir, truth_dir)

        assert list(report.per_file) == ["essay01.txt"]
        assert report.total.total == 1
        assert list(report.skipped) == ["essay02.txt"]
        assert "line 1" in report.skipped["essay02.txt"]

    def test_custom_extensions(self, tmp_path):
        config = EvaluationConfig(segments_extension=".seg", ground_truth_extension=".gold")
        evaluator = SegmentationEvaluator(config)
        assert evaluator.ground_truth_name("x.seg") == "x.gold"

    def test_missing_segments_directory(self, tmp_path):
        with pytest.raises(InputAccessError):
            SegmentationEvaluator().evaluate_directories(tmp_path / "none", tmp_path)
