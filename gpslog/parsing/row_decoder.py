"""
Lazy decoding of CSV data lines into raw records.
"""

import csv
from typing import Iterable, Iterator, Sequence, Union

from ..exceptions import MalformedRowWarning
from ..logger import setup_logger
from ..models.records import RawRecord

logger = setup_logger(__name__)


class RowDecoder:
    """
    Turns data lines into dicts keyed by the column assignment.

    Malformed lines (bad bytes, wrong field count, unparseable quoting) are
    logged and skipped. Counts of decoded and skipped rows are kept for
    reporting.
    """

    def __init__(
        self,
        columns: Sequence[str],
        delimiter: str = ",",
        start_line: int = 0,
        encoding: str = "utf-8",
    ):
        self.columns = tuple(columns)
        self.delimiter = delimiter
        self.start_line = start_line
        self.encoding = encoding
        self.decoded = 0
        self.skipped = 0

    def decode(self, lines: Iterable[Union[str, bytes]]) -> Iterator[RawRecord]:
        """
        Yield one record per valid data line.

        Args:
            lines: All lines of the file, from line 0, as text or raw bytes;
                lines before ``start_line`` are skipped

        Yields:
            RawRecord for each well-formed data line
        """
        for line_number, line in enumerate(lines):
            if line_number < self.start_line:
                continue

            if isinstance(line, bytes):
                try:
                    line = line.decode(self.encoding)
                except UnicodeDecodeError as e:
                    self._skip(line_number, f"bad {self.encoding} bytes: {e.reason}")
                    continue

            line = line.rstrip("\r\n")
            if not line.strip():
                continue

            try:
                fields = next(csv.reader([line], delimiter=self.delimiter, strict=True))
            except csv.Error as e:
                self._skip(line_number, f"could not decode line: {e}")
                continue

            if len(fields) != len(self.columns):
                self._skip(
                    line_number,
                    f"expected {len(self.columns)} fields, found {len(fields)}",
                )
                continue

            self.decoded += 1
            yield dict(zip(self.columns, (value.strip() for value in fields)))

    def _skip(self, line_number: int, reason: str) -> None:
        self.skipped += 1
        logger.warning(f"{MalformedRowWarning.__name__}: skipping line {line_number}: {reason}")


def decode_rows(
    lines: Iterable[str],
    columns: Sequence[str],
    delimiter: str = ",",
    start_line: int = 0,
) -> Iterator[RawRecord]:
    """Decode data lines lazily; see RowDecoder."""
    return RowDecoder(columns, delimiter, start_line).decode(lines)
