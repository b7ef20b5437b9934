"""Parsing package for header discovery, column matching and time inference."""

from .column_matcher import match_columns
from .csv_parser import read_csv_log
from .header_locator import locate_header
from .row_decoder import RowDecoder, decode_rows
from .similarity import dice_coefficient, sequence_ratio
from .time_normalizer import TimeNormalizer, time_normalizer
from .year_inference import estimate_year
