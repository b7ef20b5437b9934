"""
Output path rendering for normalized records.
"""

import json
import uuid
from dataclasses import asdict, dataclass
from typing import Mapping, Optional

from ..models.records import FileInfo

# UUID v5 namespace for input files
FILE_NAMESPACE = uuid.UUID("72d0637d-2fab-4e6a-b195-c28b5f4aabcb")

GEOHASH_BASE32 = "0123456789bcdefghjkmnpqrstuvwxyz"
GEOHASH_PRECISION = 7

# KSUID timestamps count seconds from 2014-05-13T16:53:20Z
KSUID_EPOCH = 1_400_000_000
KSUID_LENGTH = 27
BASE62 = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"


def _stable_json(data: Mapping) -> str:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)


def file_uuid(info: FileInfo) -> uuid.UUID:
    """Deterministic id for an input file, from its info."""
    return uuid.uuid5(FILE_NAMESPACE, _stable_json(info.to_dict()))


def record_uuid(record: Mapping, file_id: uuid.UUID) -> uuid.UUID:
    """Deterministic id for a record within its file."""
    return uuid.uuid5(file_id, _stable_json(record))


def geohash(lat: float, lon: float, precision: int = GEOHASH_PRECISION) -> str:
    """
    Encode a position as a geohash.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees
        precision: Number of characters

    Raises:
        ValueError: If the position is out of range
    """
    if not (-90 <= lat <= 90 and -180 <= lon <= 180):
        raise ValueError(f"Position out of range: {lat}, {lon}")

    lat_range = [-90.0, 90.0]
    lon_range = [-180.0, 180.0]
    chars = []
    bits = 0
    bit_count = 0
    even = True

    # Bits alternate longitude, latitude; every 5 bits make one character
    while len(chars) < precision:
        value, bounds = (lon, lon_range) if even else (lat, lat_range)
        mid = (bounds[0] + bounds[1]) / 2
        if value >= mid:
            bits = bits * 2 + 1
            bounds[0] = mid
        else:
            bits = bits * 2
            bounds[1] = mid
        even = not even

        bit_count += 1
        if bit_count == 5:
            chars.append(GEOHASH_BASE32[bits])
            bits = 0
            bit_count = 0

    return "".join(chars)


def ksuid(time_ms: int, payload: bytes) -> str:
    """
    K-sortable id from a Unix ms time and a 16-byte payload.

    Ids sort by time to the second, then by payload.

    Raises:
        ValueError: If the time is outside the KSUID range or the payload
            is not 16 bytes
    """
    timestamp = time_ms // 1000 - KSUID_EPOCH
    if not 0 <= timestamp < 2 ** 32:
        raise ValueError(f"Time {time_ms} is outside the KSUID range")
    if len(payload) != 16:
        raise ValueError(f"KSUID payload must be 16 bytes, got {len(payload)}")

    number = int.from_bytes(timestamp.to_bytes(4, "big") + payload, "big")
    chars = []
    while number:
        number, digit = divmod(number, 62)
        chars.append(BASE62[digit])
    return "".join(reversed(chars)).rjust(KSUID_LENGTH, "0")


def position_geohash(lat, lon) -> Optional[str]:
    """Geohash of raw lat/lon values, or None when they are not a position."""
    try:
        return geohash(float(lat), float(lon))
    except (TypeError, ValueError):
        return None


def record_ksuid(time_ms: int, record_id: uuid.UUID) -> Optional[str]:
    """KSUID of a record, or None when its time predates KSUIDs."""
    try:
        return ksuid(time_ms, record_id.bytes)
    except ValueError:
        return None


@dataclass(frozen=True)
class PathContext:
    """
    Fields available to output path templates.

    Attributes:
        year: Year of the record (estimated for the file, else from its time)
        time: Normalized Unix ms time
        file_uuid: Id of the input file
        record_uuid: Id of the record
        lat: Raw latitude, if the record has one
        lon: Raw longitude, if the record has one
        geohash: 7-character geohash of the position, if it has one
        ksuid: Time-ordered id of the record, if its time allows one
    """
    year: int
    time: int
    file_uuid: str
    record_uuid: str
    lat: Optional[str] = None
    lon: Optional[str] = None
    geohash: Optional[str] = None
    ksuid: Optional[str] = None


def render_path(template: str, context: PathContext) -> str:
    """
    Fill a ``str.format`` template from a PathContext.

    Fields that are None are left out, so a template naming one fails.

    Raises:
        KeyError: If the template names a field that is missing or None
    """
    fields = {name: value for name, value in asdict(context).items() if value is not None}
    return template.format(**fields)
