"""
Header discovery for CSV logs that may start with a block of comments.
"""

from typing import Iterable, Optional, Sequence

from ..exceptions import HeaderNotFoundError
from ..logger import setup_logger
from ..models.records import HeaderInfo

logger = setup_logger(__name__)


def comment_prefix_length(line: str, markers: Sequence[str]) -> int:
    """
    Length of the longest comment marker the line starts with.

    Returns 0 when the line is not a comment.
    """
    return max((len(marker) for marker in markers if line.startswith(marker)), default=0)


def locate_header(lines: Iterable[str], comment_markers: Sequence[str] = ('%', '#')) -> HeaderInfo:
    """
    Find the header line, where data begins, and any top comment.

    If the file starts with a comment block, the header is assumed to be the
    last line of that block; earlier comment lines become the leading comment.
    Otherwise the first line is the header.

    Only reads as far as the first data line, so ``lines`` may be a lazy
    stream.

    Args:
        lines: Lines of the file (line terminators are stripped)
        comment_markers: Prefixes marking comment lines

    Returns:
        HeaderInfo for the file

    Raises:
        HeaderNotFoundError: If no non-comment line is found
    """
    header: Optional[str] = None
    top_comment: Optional[str] = None
    start_line = 0

    for line in lines:
        line = line.rstrip("\r\n")
        prefix = comment_prefix_length(line, comment_markers)

        if prefix:
            # Previous candidate was not the header after all
            if header is not None:
                top_comment = header if top_comment is None else f"{top_comment}\n{header}"
            header = line[prefix:]
        elif start_line == 0:
            # No top comment block, first line is the header
            return HeaderInfo(raw_header_line=line.rstrip(), data_start_line=1)
        else:
            logger.debug(f"Header found after {start_line} comment lines")
            return HeaderInfo(
                raw_header_line=header.strip(),
                data_start_line=start_line,
                leading_comment=top_comment,
            )

        start_line += 1

    raise HeaderNotFoundError(f"Could not find header after {start_line} comment lines")
