"""
gpslog - normalization of loosely structured GPS sensor logs.
"""

from .config import IngestConfig, load_config
from .exceptions import (
    ColumnsNotFoundError,
    HeaderNotFoundError,
    IngestError,
    TimeFormatUnresolvedError,
    UnsupportedFileError,
)
from .models import ColumnAssignment, FileInfo, HeaderInfo, InputFile, LogicalColumn
from .parsing import (
    estimate_year,
    locate_header,
    match_columns,
    read_csv_log,
    time_normalizer,
)

__version__ = "0.1.0"
