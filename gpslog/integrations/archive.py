"""
Input file opening.
Dispatches plain-text/CSV logs to the CSV reader and walks zip archives.
"""

import mimetypes
import zipfile
from pathlib import Path
from typing import BinaryIO, Callable, Iterator, Optional

from ..config import IngestConfig
from ..exceptions import IngestError, UnsupportedFileError
from ..logger import setup_logger
from ..models.records import InputFile
from ..parsing.csv_parser import read_csv_log

logger = setup_logger(__name__)

CSV_TYPES = {"text/csv", "text/plain", "text/tab-separated-values"}
CSV_SUFFIXES = {".csv", ".txt", ".tsv", ".log"}
ZIP_TYPES = {"application/zip", "application/x-zip-compressed"}

# (filename, error) -> None
ErrorHandler = Callable[[str, Exception], None]


def _log_error(filename: str, error: Exception) -> None:
    logger.error(f"Error reading {filename}: {error}")


def guess_file_type(filename: str | Path, stream: Optional[BinaryIO] = None) -> str:
    """
    Guess whether a file is a CSV log or a zip archive.

    Returns:
        "csv", "zip" or the guessed MIME type for anything else
    """
    path = Path(filename)
    mime, _ = mimetypes.guess_type(path.name)

    if mime in ZIP_TYPES or path.suffix.lower() == ".zip":
        return "zip"
    if stream is None and path.is_file() and zipfile.is_zipfile(path):
        return "zip"
    if mime in CSV_TYPES or path.suffix.lower() in CSV_SUFFIXES:
        return "csv"
    return mime or "unknown"


def open_input(
    filename: str | Path,
    stream: Optional[BinaryIO] = None,
    config: Optional[IngestConfig] = None,
    on_error: ErrorHandler = _log_error,
) -> Iterator[InputFile]:
    """
    Open a file, or every file inside an archive.

    Files that cannot be opened are reported to ``on_error`` and skipped so
    that the rest of an archive or batch is still read.

    Args:
        filename: Path of the file (or entry name inside an archive)
        stream: Already-open byte stream for archive entries
        config: Run configuration
        on_error: Called with (filename, error) for each unreadable file

    Yields:
        InputFile for each readable log
    """
    config = config or IngestConfig()
    try:
        file_type = guess_file_type(filename, stream)
        if file_type == "csv":
            yield from read_csv_log(config.columns, filename, stream, config)
        elif file_type == "zip":
            yield from open_zip(filename, stream, config, on_error)
        else:
            raise UnsupportedFileError(f"Unsupported file type {file_type}")
    except (IngestError, OSError, zipfile.BadZipFile) as e:
        on_error(str(filename), e)


def open_zip(
    filename: str | Path,
    stream: Optional[BinaryIO] = None,
    config: Optional[IngestConfig] = None,
    on_error: ErrorHandler = _log_error,
) -> Iterator[InputFile]:
    """Open every entry of a zip archive in turn."""
    if stream is not None:
        raise UnsupportedFileError("Nested zip archives not supported")

    with zipfile.ZipFile(filename, "r") as zf:
        for entry in zf.infolist():
            if entry.is_dir():
                continue
            logger.debug(f"Opening {entry.filename} from {filename}")
            with zf.open(entry) as entry_stream:
                yield from open_input(entry.filename, entry_stream, config, on_error)
