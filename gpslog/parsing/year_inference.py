"""
Year estimation for GPS logs whose timestamps do not say which year they are.
Looks for a year-shaped token in the filename, then in the top comment.
"""

import re
from typing import Optional

from ..config import MIN_YEAR
from ..logger import setup_logger

logger = setup_logger(__name__)

# Group of 4 digits not touching other digits
YEAR_RE = re.compile(r"(?<!\d)\d{4}(?!\d)")


def _find_year(text: str, min_year: int, max_year: Optional[int]) -> Optional[int]:
    match = YEAR_RE.search(text)
    if not match:
        return None
    year = int(match.group(0))
    if year < min_year or (max_year is not None and year > max_year):
        return None
    return year


def estimate_year(
    filename: str,
    leading_comment: Optional[str] = None,
    *,
    min_year: int = MIN_YEAR,
    max_year: Optional[int] = None,
) -> Optional[int]:
    """
    Guess the year a dataset is from.

    Only the first 4-digit token in each text is considered.

    Args:
        filename: Name of the file, e.g. "gps_2014_07_06_13_53_40.txt"
        leading_comment: Top comment text from the file, if any
        min_year: Lowest acceptable year
        max_year: Highest acceptable year (None = unbounded)

    Returns:
        The year, or None when there is no usable hint
    """
    year = _find_year(filename, min_year, max_year)
    if year is None and leading_comment:
        year = _find_year(leading_comment, min_year, max_year)

    logger.debug(f"Estimated year for '{filename}': {year}")
    return year
