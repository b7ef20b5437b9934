"""
Record data models for GPS log ingestion.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, Optional, Tuple, Union

# Raw row as decoded from a data line (assignment key -> raw string)
RawRecord = Dict[str, str]

# Anything usable as a logical column: "lat", {"name": ..., "key": ...}
ColumnSpec = Union[str, Mapping[str, str], "LogicalColumn"]


@dataclass(frozen=True)
class LogicalColumn:
    """
    A field expected in the input, independent of its raw spelling.

    Attributes:
        name: Label to search for in a raw header
        key: Canonical output field name
    """
    name: str
    key: str

    def __post_init__(self):
        if not self.name:
            raise ValueError("Column name cannot be empty")
        if not self.key:
            raise ValueError("Column key cannot be empty")

    @classmethod
    def parse(cls, spec: ColumnSpec) -> 'LogicalColumn':
        """Create a LogicalColumn from a bare string, mapping, or column."""
        if isinstance(spec, LogicalColumn):
            return spec
        if isinstance(spec, str):
            return cls(name=spec, key=spec)
        name = spec['name']
        return cls(name=name, key=spec.get('key', name))


@dataclass(frozen=True)
class HeaderInfo:
    """
    Where the header of a tabular log file is.

    Attributes:
        raw_header_line: Header text, markers and trailing whitespace stripped
        data_start_line: 0-based index of the first data row
        leading_comment: Comment lines above the header, newline-joined
    """
    raw_header_line: str
    data_start_line: int
    leading_comment: Optional[str] = None

    def __post_init__(self):
        if self.data_start_line < 0:
            raise ValueError("Data start line cannot be negative")


@dataclass(frozen=True)
class ColumnAssignment:
    """
    Output key for every raw column position.

    Attributes:
        keys: One key per raw column, in header order
        claims: Raw column name -> logical keys that matched it
    """
    keys: Tuple[str, ...]
    claims: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    def __len__(self) -> int:
        return len(self.keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys)

    @property
    def ambiguous(self) -> Dict[str, Tuple[str, ...]]:
        """Raw columns claimed by more than one logical key."""
        return {raw: keys for raw, keys in self.claims.items() if len(keys) > 1}


@dataclass(frozen=True)
class FileInfo:
    """
    Everything known about one input file before its rows are read.

    Attributes:
        filename: Name of the file (archive entry name for nested files)
        header: Located header
        columns: Resolved column assignment
    """
    filename: str
    header: HeaderInfo
    columns: ColumnAssignment

    @property
    def leading_comment(self) -> Optional[str]:
        return self.header.leading_comment

    def to_dict(self) -> dict:
        """Convert file info to a JSON-friendly dictionary."""
        return {
            'filename': self.filename,
            'columns': list(self.columns.keys),
            'header': self.header.raw_header_line,
            'startline': self.header.data_start_line,
            'topcomment': self.header.leading_comment,
        }


@dataclass
class InputFile:
    """One opened file: its info and a lazy stream of raw rows."""
    info: FileInfo
    data: Iterator[RawRecord]
    # RowDecoder feeding data, for decoded/skipped counts
    decoder: Any = None
