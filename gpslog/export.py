"""
Export of normalized records.
Sinks that receive (path, record) pairs, plus a DataFrame helper for analysis.
"""

import json
from pathlib import Path
from typing import Iterable, List, Mapping, Protocol, Tuple

import pandas as pd

from .logger import setup_logger

logger = setup_logger(__name__)


class RecordSink(Protocol):
    """Destination for normalized records."""

    def write(self, path: str, record: Mapping) -> None:
        ...


class MemorySink:
    """Keeps written records in a list."""

    def __init__(self):
        self.records: List[Tuple[str, dict]] = []

    def write(self, path: str, record: Mapping) -> None:
        self.records.append((path, dict(record)))


class JsonLinesSink:
    """
    Appends one JSON object per record to a file.

    Each line is ``{"path": ..., "data": {...}}``. Use as a context manager.
    """

    def __init__(self, output_file: str | Path):
        self.output_file = Path(output_file)
        self.count = 0
        self._handle = None

    def __enter__(self) -> 'JsonLinesSink':
        self.output_file.parent.mkdir(parents=True, exist_ok=True)
        self._handle = open(self.output_file, "a", encoding="utf-8")
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def write(self, path: str, record: Mapping) -> None:
        if self._handle is None:
            raise RuntimeError("JsonLinesSink is not open")
        self._handle.write(json.dumps({"path": path, "data": record}, default=str) + "\n")
        self.count += 1

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            logger.info(f"Wrote {self.count} records to {self.output_file}")


def records_to_dataframe(records: Iterable[Mapping]) -> pd.DataFrame:
    """
    Collect normalized records into a DataFrame.

    Adds a UTC ``datetime`` column from the Unix ms ``time`` field.

    Args:
        records: Normalized records

    Returns:
        DataFrame with one row per record
    """
    df = pd.DataFrame(list(records))
    if df.empty:
        return df

    if 'time' in df.columns:
        df['datetime'] = pd.to_datetime(df['time'], unit='ms', utc=True)
    return df


def read_jsonl(path: str | Path) -> pd.DataFrame:
    """Load a JsonLinesSink file back as a DataFrame of record data."""
    with open(path, "r", encoding="utf-8") as f:
        return records_to_dataframe(json.loads(line)["data"] for line in f if line.strip())
