"""
Unit tests for timestamp inference and GPS time conversion
"""
from datetime import datetime, timezone

import numpy as np
import pytest

from gpslog.exceptions import TimeFormatUnresolvedError
from gpslog.parsing.gps_time import (
    GPS_EPOCH_UNIX_MS,
    gps_to_unix_ms,
    leap_seconds_at_gps,
    leap_seconds_at_unix,
    unix_to_gps_ms,
)
from gpslog.parsing.time_normalizer import build_hypotheses, probe, time_normalizer


@pytest.mark.unit
class TestTimeNormalizer:
    """Test time_normalizer."""

    def test_ymd_time(self):
        """Calendar strings are parsed in the configured zone."""
        ymdt = "2014/07/06 13:53:50"

        f = time_normalizer(ymdt, timezone="America/New_York")

        assert f.hypothesis == "calendar"
        assert f(ymdt) == 1_404_669_230_000

    def test_ymd_time_local(self):
        """Without a zone, naive times are local time."""
        ymdt = "2014/07/06 13:53:50"

        f = time_normalizer(ymdt)

        assert f(ymdt) == int(datetime(2014, 7, 6, 13, 53, 50).timestamp() * 1000)

    def test_iso_with_offset(self):
        """Times carrying an offset ignore the configured zone."""
        f = time_normalizer("2021-06-29T21:50:07.495Z", timezone="Asia/Tokyo")

        assert f("2021-06-29T21:50:07.495Z") == 1_625_003_407_495

    def test_datetime_value(self):
        """Native datetimes are calendar values."""
        when = datetime(2021, 6, 29, 21, 50, 7, 495000, tzinfo=timezone.utc)

        f = time_normalizer(when)

        assert f.hypothesis == "calendar"
        assert f(when) == 1_625_003_407_495

    def test_unix_milliseconds(self):
        """Numbers in the right year are epoch milliseconds."""
        unixms = 1_625_003_407_495

        f = time_normalizer(unixms, 2021)

        assert f.hypothesis == "numeric date"
        assert f(unixms) == unixms

    def test_unix_seconds(self):
        unixs = 1_625_003_407.495

        f = time_normalizer(unixs, 2021)

        assert f.hypothesis == "unix seconds"
        assert f(unixs) == 1_625_003_407_495

    def test_gps_milliseconds(self):
        gpsms = 1_625_003_407_495

        f = time_normalizer(gpsms, 2031)

        assert f.hypothesis == "gps milliseconds"
        assert f(gpsms) == 1_940_968_189_495

    def test_gps_seconds(self):
        gpss = 1_625_003_407.495

        f = time_normalizer(gpss, 2031)

        assert f.hypothesis == "gps seconds"
        assert f(gpss) == 1_940_968_189_495

    def test_numeric_strings(self):
        """CSV values arrive as strings and are coerced to numbers."""
        f = time_normalizer("1625003407.495", 2021)

        assert f.hypothesis == "unix seconds"
        assert f(" 1625003407.495 ") == 1_625_003_407_495

    def test_numpy_values(self):
        f = time_normalizer(np.float64(1_625_003_407.495), 2021)

        assert f(np.float64(1_625_003_407.495)) == 1_625_003_407_495

    def test_year_range(self):
        """Without a known year the configured range decides."""
        f = time_normalizer(1_625_003_407.495, min_year=2000)

        assert f.hypothesis == "unix seconds"

    def test_max_year_rejects(self):
        """Every interpretation outside the range is rejected."""
        with pytest.raises(TimeFormatUnresolvedError) as exc_info:
            time_normalizer(1_625_003_407_495, min_year=1990, max_year=2000)

        assert exc_info.value.sample == 1_625_003_407_495

    def test_unresolved(self):
        with pytest.raises(TimeFormatUnresolvedError) as exc_info:
            time_normalizer("not a time")

        assert "not a time" in str(exc_info.value)

    def test_wrong_known_year(self):
        with pytest.raises(TimeFormatUnresolvedError):
            time_normalizer("2014/07/06 13:53:50", 1999)

    def test_repeated_hour_takes_first(self):
        """In the fall-back hour the summer time offset is used."""
        f = time_normalizer("2021/11/07 01:30:00", timezone="America/New_York")

        # 05:30Z (EDT), not 06:30Z (EST)
        assert f("2021/11/07 01:30:00") == 1_636_263_000_000

    def test_skipped_hour_shifts_forward(self):
        """A wall time skipped by spring-forward is read with the winter offset."""
        f = time_normalizer("2021/03/14 02:30:00", timezone="America/New_York")

        # 07:30Z, the same instant as 03:30 EDT
        assert f("2021/03/14 02:30:00") == 1_615_707_000_000
        assert f("2021/03/14 03:30:00") == 1_615_707_000_000

    def test_compact_iso_date(self):
        """Eight-digit dates are calendar dates, not epoch numbers."""
        f = time_normalizer("20140706", 2014, timezone="UTC")

        assert f.hypothesis == "calendar"
        assert f("20140706") == 1_404_604_800_000

    def test_compact_iso_date_default_range(self):
        f = time_normalizer("20140706", timezone="UTC")

        assert f.hypothesis == "calendar"

    def test_invalid_compact_date_is_numeric(self):
        """Digit runs that are not dates fall through to the numeric readings."""
        f = time_normalizer("99999999")

        assert f.hypothesis == "numeric date"

    def test_hypothesis_locked(self):
        """Later values are never re-interpreted."""
        f = time_normalizer("2014/07/06 13:53:50", timezone="UTC")

        with pytest.raises(TypeError):
            f("1404669230")

    def test_idempotent(self):
        f = time_normalizer(1_625_003_407.495, 2031)

        assert {f(1_625_003_407.495) for _ in range(5)} == {1_940_968_189_495}

    @pytest.mark.parametrize("unix_ms", [
        946_684_800_000,
        1_404_669_230_123,
        1_625_003_407_495,
        4_102_444_799_999,
    ])
    def test_seconds_round_trip(self, unix_ms):
        """Seconds renderings come back as the original ms."""
        seconds = unix_ms / 1000

        f = time_normalizer(seconds, min_year=2000)

        assert f(seconds) == unix_ms


@pytest.mark.unit
class TestHypotheses:
    """Test the ordered hypothesis list."""

    def test_order(self):
        names = [h.name for h in build_hypotheses()]

        assert names == [
            "calendar",
            "numeric date",
            "unix seconds",
            "gps milliseconds",
            "gps seconds",
        ]

    def test_probe_failure_is_unparsed(self):
        """A failing parse is a rejected result, not an exception."""
        calendar = build_hypotheses()[0]

        result = probe(calendar, 12345)

        assert not result.parsed
        assert result.year is None

    def test_probe_non_finite(self):
        """NaN and infinity are never times."""
        numeric = build_hypotheses()[1]

        assert not probe(numeric, float("nan")).parsed
        assert not probe(numeric, "inf").parsed

    def test_probe_year(self):
        numeric = build_hypotheses()[1]

        result = probe(numeric, "1625003407495")

        assert result.parsed
        assert result.year == 2021
        assert result.unix_ms == 1_625_003_407_495


@pytest.mark.unit
class TestGpsTime:
    """Test GPS <-> Unix conversion."""

    def test_epoch(self):
        assert gps_to_unix_ms(0) == GPS_EPOCH_UNIX_MS

    def test_leap_seconds(self):
        assert leap_seconds_at_gps(0) == 0
        assert leap_seconds_at_unix(1_404_669_230_000) == 16
        assert leap_seconds_at_unix(1_625_003_407_495) == 18

    def test_known_conversion(self):
        assert gps_to_unix_ms(1_625_003_407_495) == 1_940_968_189_495
        assert gps_to_unix_ms(1_088_704_446_000) == 1_404_669_230_000

    @pytest.mark.parametrize("unix_ms", [
        400_000_000_000,
        1_404_669_230_000,
        1_625_003_407_495,
    ])
    def test_round_trip(self, unix_ms):
        assert gps_to_unix_ms(unix_to_gps_ms(unix_ms)) == unix_ms
