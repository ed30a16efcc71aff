"""Directory scan: one independent tempo analysis per audio file.

Workers decode and analyse a single file and hand back a ``FileResult``;
they never write output. The coordinating thread collects results as
they complete and is the only writer to the sink, so report order across
files follows completion order and is not stable between runs.
"""
from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

from .config import DEFAULT_EXTENSIONS, TempoConfig
from .decoding import DecodeError, decode
from .dsp_engine.pipeline import TempoReport, analyze_audio
from .sink import ConsoleSink, OutputSink

logger = logging.getLogger("bpmscan.batch")


@dataclass
class FileResult:
    path: str
    report: Optional[TempoReport] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.report is not None

    def format_line(self) -> str:
        if self.report is not None:
            return f"Detected BPM for {self.path}: {self.report.bpm:g}"
        return self.error or f"Error processing {self.path}"


def find_audio_files(directory: str, extensions: Sequence[str] = DEFAULT_EXTENSIONS) -> List[str]:
    """Return sorted paths of files in ``directory`` with a recognised suffix.

    Not recursive. Raises ``FileNotFoundError`` if the directory is missing.
    """

    if not os.path.isdir(directory):
        raise FileNotFoundError(f"Directory not found: {directory}")

    wanted = {ext.lower() for ext in extensions}
    found = []
    with os.scandir(directory) as entries:
        for entry in entries:
            if entry.is_file() and os.path.splitext(entry.name)[1].lower() in wanted:
                found.append(entry.path)
    return sorted(found)


def analyze_file(path: str, config: Optional[TempoConfig] = None) -> FileResult:
    """Decode and analyse one file. File-level failures become ``error``."""

    try:
        audio = decode(path)
    except DecodeError as exc:
        logger.warning("[BATCH] Skipping %s: %s", path, exc)
        return FileResult(path=path, error=str(exc))

    report = analyze_audio(audio, config)
    logger.info("[BATCH] %s -> %.6f BPM (%d peaks)", path, report.bpm, report.peak_count)
    return FileResult(path=path, report=report)


class BatchRunner:
    """Runs ``analyze_file`` over a directory on a bounded thread pool."""

    def __init__(self, config: Optional[TempoConfig] = None, sink: Optional[OutputSink] = None):
        self.config = config or TempoConfig()
        self.sink = sink or ConsoleSink()

    def announce(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.sink.write(f"Found: {os.path.basename(path)}")

    def report(self, result: FileResult) -> None:
        self.sink.write(result.format_line(), error=not result.ok)

    def run_files(self, paths: Sequence[str]) -> List[FileResult]:
        results: List[FileResult] = []
        if not paths:
            return results

        workers = min(self.config.worker_count, len(paths))
        if workers == 1:
            for path in paths:
                result = self._guarded(path)
                self.report(result)
                results.append(result)
            return results

        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="bpmscan") as pool:
            futures = {pool.submit(analyze_file, path, self.config): path for path in paths}
            for future in as_completed(futures):
                path = futures[future]
                try:
                    result = future.result()
                except Exception as exc:
                    logger.exception("[BATCH] Worker failed for %s", path)
                    result = FileResult(path=path, error=f"Error processing {path}: {exc}")
                self.report(result)
                results.append(result)
        return results

    def run(self, directory: str) -> List[FileResult]:
        """Scan ``directory``, announce matches, then analyse each file."""

        paths = find_audio_files(directory, self.config.extensions)
        logger.info("[BATCH] %d audio files in %s (workers=%d)", len(paths), directory, self.config.worker_count)
        self.announce(paths)
        return self.run_files(paths)

    def _guarded(self, path: str) -> FileResult:
        try:
            return analyze_file(path, self.config)
        except Exception as exc:
            logger.exception("[BATCH] Analysis failed for %s", path)
            return FileResult(path=path, error=f"Error processing {path}: {exc}")
