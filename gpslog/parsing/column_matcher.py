"""
Column matching: assign raw header columns to logical columns by fuzzy name.
"""

from typing import Dict, List, Sequence

from ..exceptions import AmbiguousColumnWarning, ColumnsNotFoundError
from ..logger import setup_logger
from ..models.records import ColumnAssignment, ColumnSpec, LogicalColumn
from .similarity import Scorer, best_match, dice_coefficient

logger = setup_logger(__name__)


def split_header(raw_header: str, delimiter: str) -> List[str]:
    """Split a header line into trimmed raw column names."""
    return [name.strip() for name in raw_header.split(delimiter)]


def match_columns(
    desired: Sequence[ColumnSpec],
    raw_header: str,
    delimiter: str = ",",
    scorer: Scorer = dice_coefficient,
) -> ColumnAssignment:
    """
    Work out which raw column holds each logical column.

    Each logical column claims the raw column whose name scores highest
    against its ``name``. Raw columns nobody claims keep their raw name.
    When several logical columns claim the same raw column the last one
    wins and an AmbiguousColumnWarning is logged.

    Args:
        desired: Logical columns to find, in priority order
        raw_header: Header line of the file
        delimiter: Field delimiter
        scorer: Similarity function ``(a, b) -> float``

    Returns:
        ColumnAssignment with one key per raw column

    Raises:
        ColumnsNotFoundError: If any logical column could not claim a column
    """
    columns = [LogicalColumn.parse(col) for col in desired]
    raw_names = split_header(raw_header, delimiter)

    keys = list(raw_names)
    claims: Dict[str, List[str]] = {}
    missing: List[str] = []

    # Find most likely match for each column
    for col in columns:
        index, score = best_match(col.name, raw_names, scorer)
        if index < 0 or score <= 0:
            missing.append(col.key)
            continue
        target = raw_names[index]
        claims.setdefault(target, []).append(col.key)
        keys[index] = col.key
        logger.debug(f"Column {col.key!r} matched {target!r} (score {score:.2f})")

    for target, claimed_by in claims.items():
        if len(claimed_by) > 1:
            logger.warning(
                f"{AmbiguousColumnWarning.__name__}: multiple columns matched field "
                f"{target!r}: {claimed_by}"
            )

    if missing:
        raise ColumnsNotFoundError(missing, raw_header)

    return ColumnAssignment(
        keys=tuple(keys),
        claims={target: tuple(claimed_by) for target, claimed_by in claims.items()},
    )
