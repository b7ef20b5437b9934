"""
Conversion between GPS time and Unix time.

GPS time counts from 1980-01-06 and does not include leap seconds, so it
runs ahead of UTC by the number of leap seconds inserted since then.
"""

import calendar
from bisect import bisect_right
from datetime import date
from typing import List

# Unix ms of the GPS epoch (1980-01-06T00:00:00Z)
GPS_EPOCH_UNIX_MS = 315_964_800_000

# UTC dates on which a leap second took effect
LEAP_SECOND_DATES = [
    date(1981, 7, 1),
    date(1982, 7, 1),
    date(1983, 7, 1),
    date(1985, 7, 1),
    date(1988, 1, 1),
    date(1990, 1, 1),
    date(1991, 1, 1),
    date(1992, 7, 1),
    date(1993, 7, 1),
    date(1994, 7, 1),
    date(1996, 1, 1),
    date(1997, 7, 1),
    date(1999, 1, 1),
    date(2006, 1, 1),
    date(2009, 1, 1),
    date(2012, 7, 1),
    date(2015, 7, 1),
    date(2017, 1, 1),
]

LEAP_SECONDS_UNIX_MS: List[int] = [
    calendar.timegm(day.timetuple()) * 1000 for day in LEAP_SECOND_DATES
]

# Same instants on the GPS clock (each leap shifts the later ones by 1s)
LEAP_SECONDS_GPS_MS: List[int] = [
    unix_ms - GPS_EPOCH_UNIX_MS + count * 1000
    for count, unix_ms in enumerate(LEAP_SECONDS_UNIX_MS)
]


def leap_seconds_at_gps(gps_ms: float) -> int:
    """Leap seconds between GPS and UTC at a GPS instant."""
    return bisect_right(LEAP_SECONDS_GPS_MS, gps_ms)


def leap_seconds_at_unix(unix_ms: float) -> int:
    """Leap seconds between GPS and UTC at a Unix instant."""
    return bisect_right(LEAP_SECONDS_UNIX_MS, unix_ms)


def gps_to_unix_ms(gps_ms: float) -> float:
    """Convert GPS milliseconds to Unix milliseconds."""
    return gps_ms + GPS_EPOCH_UNIX_MS - leap_seconds_at_gps(gps_ms) * 1000


def unix_to_gps_ms(unix_ms: float) -> float:
    """Convert Unix milliseconds to GPS milliseconds."""
    return unix_ms - GPS_EPOCH_UNIX_MS + leap_seconds_at_unix(unix_ms) * 1000
