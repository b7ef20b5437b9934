"""
Unit tests for header discovery
"""
import pytest

from gpslog.exceptions import HeaderNotFoundError
from gpslog.parsing.header_locator import comment_prefix_length, locate_header
from tests.conftest import YGZ_HEADER, YGZ_SAMPLE, YANG_HEADER, YANG_SAMPLE


@pytest.mark.unit
class TestLocateHeader:
    """Test locate_header."""

    def test_header_in_top_comment(self):
        """Last line of the top comment block is the header."""
        info = locate_header(YGZ_SAMPLE.splitlines(), ["%", "#"])

        assert info.raw_header_line == YGZ_HEADER
        assert info.data_start_line == 2
        assert info.leading_comment == " Combine p and e 6088: gps_2014_07_06_13_53_40.txt"

    def test_first_line_header(self):
        """Without a top comment the first line is the header."""
        info = locate_header(YANG_SAMPLE.splitlines(), ["%", "#"])

        assert info.raw_header_line == YANG_HEADER
        assert info.data_start_line == 1
        assert info.leading_comment is None

    @pytest.mark.parametrize("n_comments", [0, 1, 2, 5])
    def test_data_start_after_comment_block(self, n_comments):
        """N comment lines above a commented header put data at line N+1."""
        lines = [f"# note {i}" for i in range(n_comments)] + ["#a,b,c", "1,2,3"]

        info = locate_header(lines, ["#"])

        assert info.data_start_line == n_comments + 1
        assert info.raw_header_line == "a,b,c"

    def test_leading_comment_keeps_order(self):
        """Earlier comment lines are joined in order."""
        lines = ["%first", "%second", "%third", "%x,y", "1,2"]

        info = locate_header(lines, ["%"])

        assert info.leading_comment == "first\nsecond\nthird"
        assert info.raw_header_line == "x,y"

    def test_longest_marker_stripped(self):
        """Overlapping markers strip the longest match."""
        lines = ["## note", "##  a,b ", "1,2"]

        info = locate_header(lines, ["#", "##"])

        assert info.leading_comment == " note"
        assert info.raw_header_line == "a,b"

    def test_mixed_markers(self):
        """Different markers can be mixed in one block."""
        lines = ["% made by logger", "# time,lat", "1,2"]

        info = locate_header(lines, ["%", "#"])

        assert info.leading_comment == " made by logger"
        assert info.raw_header_line == "time,lat"

    def test_trailing_whitespace_stripped(self):
        """Trailing whitespace and line endings are removed from the header."""
        info = locate_header(["a,b  \r\n", "1,2\r\n"], ["#"])

        assert info.raw_header_line == "a,b"

    def test_reads_lazily(self):
        """Only the lines needed to find the header are consumed."""
        lines = iter(["#c", "#a,b", "1,2", "3,4"])
        locate_header(lines, ["#"])

        assert next(lines) == "3,4"

        lines = iter(["a,b", "1,2"])
        locate_header(lines, ["#"])

        assert next(lines) == "1,2"

    def test_only_comments(self):
        """A file with nothing but comments has no header."""
        with pytest.raises(HeaderNotFoundError):
            locate_header(["# a", "# b"], ["#"])

    def test_empty(self):
        """An empty file has no header."""
        with pytest.raises(HeaderNotFoundError):
            locate_header([], ["#"])


@pytest.mark.unit
def test_comment_prefix_length():
    """Prefix length is 0 for data lines."""
    assert comment_prefix_length("1,2", ["#"]) == 0
    assert comment_prefix_length("##x", ["#", "##"]) == 2
    assert comment_prefix_length("%x", ["#", "%"]) == 1
