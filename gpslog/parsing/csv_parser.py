"""
CSV log reading.
Finds the header, resolves the columns, and streams the data rows of one file.
"""

from itertools import tee
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Sequence

from ..config import IngestConfig
from ..logger import setup_logger
from ..models.records import ColumnSpec, FileInfo, InputFile
from .column_matcher import match_columns
from .header_locator import locate_header
from .row_decoder import RowDecoder

logger = setup_logger(__name__)


def read_csv_log(
    columns: Sequence[ColumnSpec],
    filename: str | Path,
    stream: Optional[BinaryIO] = None,
    config: Optional[IngestConfig] = None,
) -> Iterator[InputFile]:
    """
    Open a CSV log and yield it as an InputFile.

    The line stream is teed: one copy is read ahead to find the header, the
    other is decoded from the top, so the file is only read once. Data lines
    are decoded strictly; a line with bad bytes is skipped like any other
    malformed row.

    Args:
        columns: Logical columns to look for (e.g. GPS keys)
        filename: Name of the file; opened here when ``stream`` is None
        stream: Already-open byte stream (e.g. an archive entry)
        config: Run configuration (delimiter, comment markers, encoding)

    Yields:
        One InputFile whose ``data`` lazily yields raw records

    Raises:
        HeaderNotFoundError: If the file has no header
        ColumnsNotFoundError: If the header lacks some of ``columns``
    """
    config = config or IngestConfig()
    owns_stream = stream is None
    if owns_stream:
        stream = open(filename, "rb")

    header_lines, data_lines = tee(stream)

    def release():
        if owns_stream:
            stream.close()

    try:
        header = locate_header(
            (line.decode(config.encoding, errors="replace") for line in header_lines),
            config.comment_markers,
        )
        assignment = match_columns(columns, header.raw_header_line, config.delimiter)
    except Exception:
        release()
        raise
    del header_lines

    info = FileInfo(filename=str(filename), header=header, columns=assignment)
    decoder = RowDecoder(assignment.keys, config.delimiter, header.data_start_line, config.encoding)
    logger.debug(f"Columns for {filename}: {list(assignment.keys)}")

    def data():
        try:
            yield from decoder.decode(data_lines)
        finally:
            release()
            logger.debug(f"Read {decoder.decoded} rows from {filename}, skipped {decoder.skipped}")

    yield InputFile(info=info, data=data(), decoder=decoder)
