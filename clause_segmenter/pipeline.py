"""Main clause segmentation pipeline."""

import logging
from concurrent.futures import (
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    as_completed,
)
from concurrent.futures.process import BrokenProcessPool
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from .config import Config, SegmentationConfig
from .engines import ParserEngine, SynchronizedEngine, create_engine
from .exceptions import InputAccessError, SegmenterError
from .models import Segment
from .segmenter import ClauseSegmenter

logger = logging.getLogger(__name__)


def read_text(path: Path) -> str:
    """Read a UTF-8 text file with normalized line breaks and a final newline."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InputAccessError(f"Cannot read {path}: {e}") from e
    if text and not text.endswith("\n"):
        text += "\n"
    return text


def format_segments(segments: list[Segment], print_interval: bool) -> str:
    """Serialize segments, one per line, with or without their offsets."""
    return "".join(
        f"{segment if print_interval else segment.text}\n" for segment in segments
    )


def write_segments(path: Path, segments: list[Segment], print_interval: bool) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            f.write(format_segments(segments, print_interval))
    except OSError as e:
        raise InputAccessError(f"Cannot write {path}: {e}") from e


def segment_file(
    segmenter: ClauseSegmenter, input_path: Path, output_path: Path, print_interval: bool
) -> int:
    """Segment one text file and write the segments.

    Returns:
        Number of segments written
    """
    logger.info("Segmenting: %s -> %s", input_path, output_path)
    segments = segmenter.segment(read_text(input_path))
    write_segments(output_path, segments, print_interval)
    return len(segments)


# Engine of the current worker process, created once by the pool initializer
_worker_segmenter: Optional[ClauseSegmenter] = None
# Load failure of the current worker process, raised again for every file
_worker_error: Optional[SegmenterError] = None


def _init_worker(config_data: dict) -> None:
    """Build the engine of a worker process. Must be module-level for pickling.

    A failing initializer breaks the whole pool, so a load error is kept
    and reported through the results of the submitted files instead.
    """
    global _worker_segmenter, _worker_error
    config = Config(**config_data)
    engine = create_engine(config.engine)
    try:
        engine.load()
    except SegmenterError as e:
        _worker_error = e
        return
    _worker_segmenter = ClauseSegmenter(
        engine, paragraph_separator=config.segmentation.paragraph_separator
    )


def _segment_file_worker(args: tuple) -> int:
    """Segment one file in a worker process.

    Args:
        args: (input_path, output_path, print_interval)
    """
    if _worker_error is not None:
        raise _worker_error
    input_path, output_path, print_interval = args
    return segment_file(_worker_segmenter, input_path, output_path, print_interval)


class SegmentationPipeline:
    """Pipeline for segmenting text files into clauses."""

    def __init__(self, config: Config, engine: Optional[ParserEngine] = None):
        """Initialize segmentation pipeline.

        The engine is loaded here, before any file is processed, unless
        files are segmented by worker processes with their own engines.

        Args:
            config: Pipeline configuration
            engine: Engine to use instead of the one named in the configuration
        """
        self.config = config
        self._engine = engine
        self.segmenter: Optional[ClauseSegmenter] = None

        seg = config.segmentation
        if self._uses_processes() and engine is None:
            return

        engine = engine or create_engine(config.engine)
        if seg.workers > 1:
            engine = SynchronizedEngine(engine)
        engine.load()
        self.segmenter = ClauseSegmenter(engine, paragraph_separator=seg.paragraph_separator)

    @property
    def seg_config(self) -> SegmentationConfig:
        return self.config.segmentation

    def _uses_processes(self) -> bool:
        # An explicitly given engine cannot be shipped to worker processes
        return (
            self.seg_config.workers > 1
            and self.seg_config.worker_mode == "process"
            and self._engine is None
        )

    def collect_files(self, input_dir: Path) -> list[Path]:
        """All files with the configured extension below ``input_dir``, sorted."""
        return sorted(
            p for p in input_dir.rglob(f"*{self.seg_config.extension}") if p.is_file()
        )

    def segment_file(self, input_path: Path, output_path: Path) -> int:
        """Segment one file.

        Returns:
            Number of segments written
        """
        return segment_file(
            self.segmenter, input_path, output_path, self.seg_config.print_interval
        )

    def _segment_sequential(self, tasks: list[tuple]) -> int:
        files_done = 0
        for input_path, output_path, _ in tqdm(tasks, desc="Segmenting"):
            try:
                self.segment_file(input_path, output_path)
                files_done += 1
            except (InputAccessError, ValueError) as e:
                logger.error("Skipping %s: %s", input_path, e)
        return files_done

    def _segment_parallel(self, tasks: list[tuple]) -> int:
        workers = self.seg_config.workers
        use_processes = self._uses_processes()
        if use_processes:
            executor = ProcessPoolExecutor(
                max_workers=workers,
                initializer=_init_worker,
                initargs=(self.config.model_dump(),),
            )
        else:
            executor = ThreadPoolExecutor(max_workers=workers)

        files_done = 0
        desc_text = f"Segmenting ({workers} {'process' if use_processes else 'thread'} workers)"
        with executor:
            if use_processes:
                futures = {executor.submit(_segment_file_worker, task): task[0] for task in tasks}
            else:
                futures = {
                    executor.submit(self.segment_file, task[0], task[1]): task[0]
                    for task in tasks
                }
            for future in tqdm(as_completed(futures), total=len(futures), desc=desc_text):
                input_path = futures[future]
                try:
                    future.result()
                    files_done += 1
                except (InputAccessError, ValueError) as e:
                    logger.error("Skipping %s: %s", input_path, e)
                except BrokenProcessPool as e:
                    raise SegmenterError(f"Worker process terminated: {e}") from e
        return files_done

    def segment_directory(self, input_dir: Path, output_dir: Path) -> int:
        """Segment all matching files below ``input_dir`` into ``output_dir``.

        The directory structure of the input is recreated in the output.
        Files that cannot be read, parsed or written are skipped.

        Returns:
            Number of files written
        """
        output_dir.mkdir(parents=True, exist_ok=True)
        print_interval = self.seg_config.print_interval
        tasks = [
            (path, output_dir / path.relative_to(input_dir), print_interval)
            for path in self.collect_files(input_dir)
        ]
        logger.info("Found %d files in %s", len(tasks), input_dir)
        if not tasks:
            return 0

        if self.seg_config.workers <= 1:
            files_done = self._segment_sequential(tasks)
        else:
            files_done = self._segment_parallel(tasks)

        logger.info("Segmented %d of %d files into %s", files_done, len(tasks), output_dir)
        return files_done

    def run(self) -> int:
        """Run the segmentation pipeline.

        Returns:
            Number of files written
        """
        input_path = self.config.input_path
        output_path = self.config.output_path
        if not input_path:
            raise ValueError("Input path not specified in configuration")
        if not output_path:
            raise ValueError("Output path not specified in configuration")

        if input_path.is_dir():
            return self.segment_directory(input_path, output_path)
        if input_path.is_file():
            if self.segmenter is None:
                # Single files never need worker processes
                engine = create_engine(self.config.engine)
                engine.load()
                self.segmenter = ClauseSegmenter(
                    engine, paragraph_separator=self.seg_config.paragraph_separator
                )
            self.segment_file(input_path, output_path)
            return 1
        raise InputAccessError(f"Input not found: {input_path}")
