"""
Pytest configuration and fixtures
"""
import io
import sys
import zipfile
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

YGZ_HEADER = "Time, GPS time, lat, lon, altitude, speed, bearing, accuracy"
YANG_HEADER = "ids,gpsTimeAsUnixTimeInS,lats,lons,alts,speedsInMps,bearings,accuracies"

YGZ_SAMPLE = (
    "# Combine p and e 6088: gps_2014_07_06_13_53_40.txt\n"
    f"#{YGZ_HEADER}\n"
    "1404669230.000,1088704446.000,40.4278,-86.9133,187.0,0.0,0.0,6.0\n"
    "1404669231.000,1088704447.000,40.4279,-86.9134,187.5,0.5,90.0,6.0\n"
    "1404669232.000,1088704448.000,40.4280,-86.9135,188.0,1.0,90.0,5.0\n"
)

YANG_SAMPLE = (
    f"{YANG_HEADER}\n"
    "1,1625003407.495,40.42,-86.91,180.1,1.2,45,3.5\n"
    "2,1625003408.495,40.43,-86.92,180.2,1.3,46,3.6\n"
)


@pytest.fixture
def gps_columns():
    """Logical columns found in GPS logs."""
    return [
        {"name": "gps time", "key": "time"},
        "lat",
        "lon",
        "alt",
        "speed",
        "bearing",
        "accuracy",
    ]


@pytest.fixture
def ygz_file(tmp_path):
    """Log with a two-line top comment whose last line is the header."""
    path = tmp_path / "gps_2014_07_06_13_53_40.txt"
    path.write_text(YGZ_SAMPLE)
    return path


@pytest.fixture
def yang_file(tmp_path):
    """Log whose first line is the header."""
    path = tmp_path / "yang_sample_2021.csv"
    path.write_text(YANG_SAMPLE)
    return path


@pytest.fixture
def zip_file(tmp_path):
    """Archive holding both sample logs and one unsupported file."""
    path = tmp_path / "logs.zip"
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("gps_2014_07_06_13_53_40.txt", YGZ_SAMPLE)
        zf.writestr("nested/yang_sample_2021.csv", YANG_SAMPLE)
        zf.writestr("photo.png", b"\x89PNG\r\n")
    return path


@pytest.fixture
def as_stream():
    """Turn text into a byte stream, like an archive entry."""
    def _stream(text: str) -> io.BytesIO:
        return io.BytesIO(text.encode("utf-8"))
    return _stream
