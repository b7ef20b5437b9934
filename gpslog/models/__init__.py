"""
Models package - Data models and type definitions.
"""

from .records import (
    ColumnAssignment,
    FileInfo,
    HeaderInfo,
    InputFile,
    LogicalColumn,
    RawRecord,
)

__all__ = ['ColumnAssignment', 'FileInfo', 'HeaderInfo', 'InputFile', 'LogicalColumn', 'RawRecord']
