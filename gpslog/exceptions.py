"""
Errors and warning categories raised while normalizing GPS logs.

The errors are fatal for one file only. Callers catch IngestError per file
and continue with the rest of the batch. The warning categories are logged,
never raised.
"""

from typing import Any, Sequence


class IngestError(Exception):
    """Base class for per-file ingest failures."""


class HeaderNotFoundError(IngestError):
    """No non-comment line was found to use as a header."""


class ColumnsNotFoundError(IngestError):
    """One or more logical columns could not be matched in a header."""

    def __init__(self, missing: Sequence[str], header: str):
        self.missing = list(missing)
        self.header = header
        super().__init__(f"Failed to find fields {self.missing} in header {header!r}")


class TimeFormatUnresolvedError(IngestError):
    """No timestamp hypothesis produced a plausible year."""

    def __init__(self, sample: Any):
        self.sample = sample
        super().__init__(f"Could not normalize time {sample!r}")


class UnsupportedFileError(IngestError):
    """The input file type cannot be read."""


class MalformedRowWarning(UserWarning):
    """A data line could not be decoded and was skipped."""


class AmbiguousColumnWarning(UserWarning):
    """Several logical columns claimed the same raw column."""
