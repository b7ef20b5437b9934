"""
Ingest service - turns input files into normalized GPS records.
Ties together file opening, year estimation, time inference and the sink.
"""

import glob
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator, List, Optional, Tuple

import pandas as pd

from ..config import IngestConfig
from ..exceptions import ColumnsNotFoundError, IngestError, MalformedRowWarning
from ..export import RecordSink
from ..integrations.archive import open_input
from ..logger import setup_logger, log_ingest_stats
from ..models.records import InputFile
from ..parsing.time_normalizer import CONVERSION_ERRORS, time_normalizer
from ..parsing.year_inference import estimate_year
from .paths import PathContext, file_uuid, position_geohash, record_ksuid, record_uuid, render_path

logger = setup_logger(__name__)


@dataclass
class IngestStats:
    """Counters for one ingest run."""
    files_seen: int = 0
    files_imported: int = 0
    files_failed: int = 0
    records_written: int = 0
    rows_skipped: int = 0
    failures: List[Tuple[str, str]] = field(default_factory=list)


class IngestService:
    """
    Reads GPS log files and writes normalized records to a sink.

    Each record keeps its raw fields, with the ``config.time_key`` column
    replaced by Unix ms and the original value kept as ``rawtime``. A file
    that fails (no header, missing columns, unknown time format) is logged
    and skipped; the rest of the batch carries on.
    """

    def __init__(self, config: IngestConfig, sink: RecordSink):
        self.config = config
        self.sink = sink
        self.time_key = config.time_key
        self.stats = IngestStats()

    def expand_files(self, patterns: Optional[Iterable[str]] = None) -> List[Path]:
        """
        Expand glob patterns into a sorted, de-duplicated list of files.

        Args:
            patterns: Glob patterns (defaults to ``config.files``)
        """
        patterns = self.config.files if patterns is None else patterns
        found = set()
        for pattern in patterns:
            matches = glob.glob(pattern, recursive=True)
            if not matches:
                logger.warning(f"No files match {pattern}")
            found.update(Path(match) for match in matches if Path(match).is_file())
        return sorted(found)

    def normalize_file(self, input_file: InputFile) -> Iterator[Tuple[str, dict]]:
        """
        Normalize the rows of one opened file.

        The time format is inferred from the first row and locked in for the
        rest of the file. Rows whose time cannot be converted under it, or
        that lack a value the path template names (e.g. no position for
        ``{geohash}``), are skipped.

        Yields:
            (output path, normalized record) pairs

        Raises:
            TimeFormatUnresolvedError: If the first time value cannot be read
            ColumnsNotFoundError: If the file has no ``time_key`` column
        """
        info = input_file.info
        config = self.config
        year = estimate_year(
            info.filename,
            info.leading_comment,
            min_year=config.min_year,
            max_year=config.max_year,
        )
        if self.time_key not in info.columns.keys:
            raise ColumnsNotFoundError([self.time_key], info.header.raw_header_line)
        file_id = file_uuid(info)
        normalizer = None

        for row in input_file.data:
            rawtime = row[self.time_key]
            if normalizer is None:
                normalizer = time_normalizer(
                    rawtime,
                    year,
                    min_year=config.min_year,
                    max_year=config.max_year,
                    timezone=config.timezone,
                )
                logger.info(f"{info.filename}: times look like {normalizer.hypothesis}")

            try:
                time = normalizer(rawtime)
            except CONVERSION_ERRORS as e:
                self.stats.rows_skipped += 1
                logger.warning(f"{MalformedRowWarning.__name__}: bad time {rawtime!r} in {info.filename}: {e}")
                continue

            record = {**row, self.time_key: time, "rawtime": rawtime}
            record_id = record_uuid(record, file_id)
            context = PathContext(
                year=year or pd.Timestamp(time, unit="ms").year,
                time=time,
                file_uuid=str(file_id),
                record_uuid=str(record_id),
                lat=row.get("lat"),
                lon=row.get("lon"),
                geohash=position_geohash(row.get("lat"), row.get("lon")),
                ksuid=record_ksuid(time, record_id),
            )
            try:
                path = render_path(config.output_path, context)
            except KeyError as e:
                self.stats.rows_skipped += 1
                logger.warning(f"{MalformedRowWarning.__name__}: no {e} for record at {time} in {info.filename}")
                continue
            yield path, record

    def ingest_file(self, input_file: InputFile) -> int:
        """Write every normalized record of one file to the sink."""
        count = 0
        try:
            for path, record in self.normalize_file(input_file):
                self.sink.write(path, record)
                count += 1
        finally:
            # Release the underlying file even when we stop early
            close = getattr(input_file.data, "close", None)
            if close is not None:
                close()

        if input_file.decoder is not None:
            self.stats.rows_skipped += input_file.decoder.skipped
        return count

    def run(self, patterns: Optional[Iterable[str]] = None) -> IngestStats:
        """
        Ingest every file matching ``patterns`` (defaults to ``config.files``).

        Returns:
            IngestStats for this run
        """
        self.stats = IngestStats()

        for path in self.expand_files(patterns):
            for input_file in open_input(path, config=self.config, on_error=self._file_failed):
                self.stats.files_seen += 1
                filename = input_file.info.filename
                try:
                    count = self.ingest_file(input_file)
                except IngestError as e:
                    self.stats.files_failed += 1
                    self.stats.failures.append((filename, str(e)))
                    logger.error(f"Error importing file {filename}: {e}")
                    continue

                self.stats.files_imported += 1
                self.stats.records_written += count
                logger.info(f"Finished importing file {filename}: {count} records")

        log_ingest_stats(self.stats, logger)
        return self.stats

    def _file_failed(self, filename: str, error: Exception) -> None:
        self.stats.files_seen += 1
        self.stats.files_failed += 1
        self.stats.failures.append((filename, str(error)))
        logger.error(f"Error reading {filename}: {error}")
