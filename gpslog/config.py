"""
Configuration for the GPS log normalizer.
Default constants plus the validated IngestConfig built once at startup.
"""

import codecs
import os
import string
from pathlib import Path
from typing import List, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

from .models.records import LogicalColumn

# Columns expected in GPS logs
DEFAULT_GPS_COLUMNS: List[Union[str, dict]] = [
    {'name': 'gps time', 'key': 'time'},
    'lat',
    'lon',
    'alt',
    'speed',
    'bearing',
    'accuracy',
]

# Input defaults
DEFAULT_TIME_KEY = "time"
DEFAULT_DELIMITER = ","
DEFAULT_COMMENT_MARKERS: List[str] = ['%', '#']
DEFAULT_ENCODING = "utf-8"

# Plausible years for timestamps (max_year None = unbounded)
MIN_YEAR = 1970
MAX_YEAR: Optional[int] = None

# Output defaults
DEFAULT_OUTPUT_PATH = "locations/year-index/{year}/geohash-index/{geohash}/data/{ksuid}"
# Fields output_path may name
PATH_FIELDS = ("year", "time", "file_uuid", "record_uuid", "lat", "lon", "geohash", "ksuid")
DEFAULT_OUTPUT_FILE = Path("normalized.jsonl")

# Logging
LOG_LEVEL = os.getenv("GPSLOG_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE = os.getenv("GPSLOG_LOG_FILE")


class IngestConfig(BaseModel):
    """
    Run configuration, fixed for the whole run.

    Attributes:
        columns: Logical columns to look for in each header
        time_key: Column key holding the timestamp
        delimiter: Field delimiter
        comment_markers: Prefixes that mark comment lines
        min_year: Lowest plausible year for timestamps
        max_year: Highest plausible year (None = unbounded)
        timezone: Zone for naive calendar times (None = local time)
        encoding: Text encoding of input files
        files: Glob patterns of input files
        output_path: Path template for each normalized record
        output_file: JSON-lines file written by the CLI
    """
    columns: List[LogicalColumn] = Field(
        default_factory=lambda: [LogicalColumn.parse(c) for c in DEFAULT_GPS_COLUMNS]
    )
    time_key: str = DEFAULT_TIME_KEY
    delimiter: str = Field(default=DEFAULT_DELIMITER, min_length=1, max_length=1)
    comment_markers: List[str] = Field(default_factory=lambda: list(DEFAULT_COMMENT_MARKERS))
    min_year: int = MIN_YEAR
    max_year: Optional[int] = MAX_YEAR
    timezone: Optional[str] = None
    encoding: str = DEFAULT_ENCODING
    files: List[str] = Field(default_factory=list)
    output_path: str = DEFAULT_OUTPUT_PATH
    output_file: Path = DEFAULT_OUTPUT_FILE

    model_config = {"frozen": True, "arbitrary_types_allowed": True}

    @field_validator("columns", mode="before")
    @classmethod
    def _parse_columns(cls, value):
        return [LogicalColumn.parse(c) for c in value]

    @field_validator("comment_markers")
    @classmethod
    def _check_markers(cls, value: List[str]) -> List[str]:
        if any(not marker for marker in value):
            raise ValueError("Comment markers cannot be empty strings")
        return value

    @field_validator("timezone")
    @classmethod
    def _check_timezone(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone {value!r}") from e
        return value

    @field_validator("encoding")
    @classmethod
    def _check_encoding(cls, value: str) -> str:
        try:
            codecs.lookup(value)
        except LookupError as e:
            raise ValueError(f"Unknown encoding {value!r}") from e
        return value

    @field_validator("output_path")
    @classmethod
    def _check_output_path(cls, value: str) -> str:
        try:
            names = [field for _, field, _, _ in string.Formatter().parse(value) if field is not None]
        except ValueError as e:
            raise ValueError(f"Bad output path template {value!r}: {e}") from e
        for name in names:
            base = name.split(".")[0].split("[")[0]
            if base not in PATH_FIELDS:
                raise ValueError(f"Unknown output path field {name!r}, expected one of {PATH_FIELDS}")
        return value

    @model_validator(mode="after")
    def _check_years(self) -> "IngestConfig":
        if self.max_year is not None and self.max_year < self.min_year:
            raise ValueError(f"max_year {self.max_year} is before min_year {self.min_year}")
        return self

    @model_validator(mode="after")
    def _check_time_key(self) -> "IngestConfig":
        keys = [col.key for col in self.columns]
        if self.time_key not in keys:
            raise ValueError(f"time_key {self.time_key!r} is not one of the column keys {keys}")
        return self


def _split_list(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


def load_config(env_file: Optional[str | Path] = None, **overrides) -> IngestConfig:
    """
    Build the run configuration from the environment / .env file.

    Explicit keyword overrides (e.g. from the CLI) win over the environment.

    Args:
        env_file: Optional .env path (defaults to .env in the working directory)
        **overrides: IngestConfig fields to set directly

    Returns:
        Validated IngestConfig
    """
    load_dotenv(dotenv_path=env_file)

    values = {}
    if os.getenv("GPSLOG_FILES"):
        values["files"] = _split_list(os.environ["GPSLOG_FILES"])
    if os.getenv("GPSLOG_TIME_KEY"):
        values["time_key"] = os.environ["GPSLOG_TIME_KEY"]
    if os.getenv("GPSLOG_DELIMITER"):
        values["delimiter"] = os.environ["GPSLOG_DELIMITER"]
    if os.getenv("GPSLOG_COMMENT_MARKERS"):
        values["comment_markers"] = _split_list(os.environ["GPSLOG_COMMENT_MARKERS"])
    if os.getenv("GPSLOG_MIN_YEAR"):
        values["min_year"] = int(os.environ["GPSLOG_MIN_YEAR"])
    if os.getenv("GPSLOG_MAX_YEAR"):
        values["max_year"] = int(os.environ["GPSLOG_MAX_YEAR"])
    if os.getenv("GPSLOG_TIMEZONE"):
        values["timezone"] = os.environ["GPSLOG_TIMEZONE"]
    if os.getenv("GPSLOG_ENCODING"):
        values["encoding"] = os.environ["GPSLOG_ENCODING"]
    if os.getenv("GPSLOG_OUTPUT_PATH"):
        values["output_path"] = os.environ["GPSLOG_OUTPUT_PATH"]
    if os.getenv("GPSLOG_OUTPUT_FILE"):
        values["output_file"] = Path(os.environ["GPSLOG_OUTPUT_FILE"])

    values.update({k: v for k, v in overrides.items() if v is not None})
    return IngestConfig(**values)
