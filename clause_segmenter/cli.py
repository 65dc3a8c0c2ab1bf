"""Command-line interfaces for clause segmentation and its evaluation."""

import argparse
import logging
import sys
from pathlib import Path

from .config import Config
from .evaluation import SegmentationEvaluator
from .exceptions import SegmenterError
from .pipeline import SegmentationPipeline


class UsageArgumentParser(argparse.ArgumentParser):
    """Argument parser that answers usage errors with the synopsis and exit status 0."""

    def error(self, message: str) -> None:
        sys.stderr.write(f"{self.prog}: {message}\n\n")
        self.print_help(sys.stderr)
        sys.exit(0)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def parse_bool(value: str) -> bool:
    """True for "true" in any case, False for anything else."""
    return value.strip().lower() == "true"


def build_segment_parser() -> argparse.ArgumentParser:
    """Argument parser of the segmenter."""
    parser = UsageArgumentParser(
        prog="clause-segmenter",
        description="Segments the input based on clause indicators.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Segment a directory of essays, writing offsets and text
  clause-segmenter essays segments

  # Segment one file, writing only the segment texts
  clause-segmenter essay01.txt essay01.seg.txt false

  # Settings from a config file, four worker processes
  clause-segmenter --config config.yaml --workers 4
        """,
    )
    parser.add_argument(
        "input",
        type=Path,
        nargs="?",
        help="Input file or directory. In the latter case, the directory is "
        "traversed recursively and all txt-files are segmented.",
    )
    parser.add_argument(
        "output",
        type=Path,
        nargs="?",
        help="Output file or directory. If the input is a directory, the output "
        "directories will be created to match the input directory structure.",
    )
    parser.add_argument(
        "print_interval",
        type=parse_bool,
        nargs="?",
        metavar="print-interval",
        help="Whether to write the start and end character indices of each "
        "segment before the segment text. Default: true",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--language",
        type=str,
        help="Language of the texts (default: en)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        help="Number of parallel workers (default: 1)",
    )
    parser.add_argument(
        "--worker-mode",
        choices=["process", "thread"],
        help="Run workers as processes with one engine each, or as threads "
        "sharing one engine (default: process)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def build_evaluate_parser() -> argparse.ArgumentParser:
    """Argument parser of the evaluator."""
    parser = UsageArgumentParser(
        prog="segmentation-evaluator",
        description="Prints the number of automatically found segments that "
        "overlap with none, exactly one, or multiple ground-truth segments.",
    )
    parser.add_argument(
        "segments",
        type=Path,
        help="Directory containing the segmented essays. Requires that the "
        "essays were segmented with print-interval being true.",
    )
    parser.add_argument(
        "essays",
        type=Path,
        help="Directory containing the ground-truth essay files.",
    )
    parser.add_argument(
        "--csv",
        type=Path,
        help="Also write the per-file counts to this CSV file",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def build_config(args: argparse.Namespace) -> Config:
    """Build configuration from arguments."""
    # Start with config file if provided
    if args.config:
        config = Config.from_yaml(args.config)
    else:
        config = Config()

    # Override with command-line arguments
    if getattr(args, "input", None):
        config.input_path = args.input
    if getattr(args, "output", None):
        config.output_path = args.output
    if getattr(args, "print_interval", None) is not None:
        config.segmentation.print_interval = args.print_interval
    if getattr(args, "language", None):
        config.engine.language = args.language
    if getattr(args, "workers", None) is not None:
        config.segmentation.workers = args.workers
    if getattr(args, "worker_mode", None):
        config.segmentation.worker_mode = args.worker_mode

    return config


def handle_segment(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    """Handle the segment command."""
    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.input_path or not config.output_path:
        parser.error("input and output are required (as arguments or in --config)")

    try:
        pipeline = SegmentationPipeline(config)
        file_count = pipeline.run()
    except SegmenterError as e:
        logging.exception("Segmentation failed")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nSegmented {file_count} files")
    return 0


def print_report(report) -> None:
    """Print an evaluation report in tab-separated form."""
    print("# Per essay, the number of automatically found")
    print("# segments that overlap with none, exactly one, or")
    print("# multiple ground-truth segments.")
    print("#essay #no-overlap #one-overlap #more-overlaps")
    for name, counts in report.per_file.items():
        print(f"{name}\t{counts}")

    print("")
    print("# In total, the number of automatically found")
    print("# segments that overlap with none, exactly one, or")
    print("# multiple ground-truth segments.")
    print("#no-overlap #one-overlap #more-overlaps")
    print(report.total)

    print("")
    print("# In total, the number of automatically found")
    print("# segments")
    print(report.total.total)

    if report.skipped:
        print("")
        print("# Essays that could not be evaluated and are not")
        print("# included in the counts above.")
        print("#essay #reason")
        for name, reason in report.skipped.items():
            print(f"{name}\t{reason}")


def handle_evaluate(args: argparse.Namespace) -> int:
    """Handle the evaluate command."""
    try:
        config = build_config(args)
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        evaluator = SegmentationEvaluator(config.evaluation)
        report = evaluator.evaluate_directories(args.segments, args.essays)
    except SegmenterError as e:
        logging.error("Evaluation failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print_report(report)
    if args.csv:
        report.to_frame().to_csv(args.csv, index=False)
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point of the segmenter."""
    parser = build_segment_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    return handle_segment(args, parser)


def evaluate_main(argv: list[str] | None = None) -> int:
    """Entry point of the evaluator."""
    parser = build_evaluate_parser()
    args = parser.parse_args(argv)
    setup_logging(args.verbose)
    return handle_evaluate(args)


if __name__ == "__main__":
    sys.exit(main())
