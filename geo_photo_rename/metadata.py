"""
EXIF metadata extraction: GPS coordinates and capture date.
"""

import struct
from pathlib import Path
from typing import Dict, NamedTuple, Optional

import exifread

# EXIF field type RATIONAL (unsigned)
RATIONAL_FIELD_TYPES = (5,)

DATE_TAGS = ("EXIF DateTimeOriginal", "Image DateTime")

# Raised by open() or by exifread on truncated or corrupt files
EXIF_READ_ERRORS = (OSError, ValueError, KeyError, IndexError, struct.error)


class GPSCoordinate(NamedTuple):
    """Signed decimal degrees, negative for South/West."""
    latitude: float
    longitude: float


class PhotoMetadata(NamedTuple):
    """Metadata extracted from a single photo."""
    filepath: Path
    coordinate: Optional[GPSCoordinate]
    date_key: Optional[str]


def read_exif_tags(filepath: Path) -> Dict:
    """Read all EXIF tags from a file using exifread."""
    with open(filepath, 'rb') as f:
        return exifread.process_file(f, details=False)


def dms_to_decimal(tag) -> Optional[float]:
    """
    Convert a degrees/minutes/seconds rational triple to decimal degrees.

    Returns None when the tag is not a rational sequence of at least
    three components.
    """
    if getattr(tag, 'field_type', None) not in RATIONAL_FIELD_TYPES:
        return None
    values = getattr(tag, 'values', None)
    if not isinstance(values, (list, tuple)) or len(values) < 3:
        return None
    try:
        degrees = float(values[0])
        minutes = float(values[1])
        seconds = float(values[2])
    except (TypeError, ValueError, ZeroDivisionError):
        return None
    return degrees + minutes / 60.0 + seconds / 3600.0


def extract_coordinate(tags: Dict) -> Optional[GPSCoordinate]:
    """Decode GPS latitude/longitude from exifread tags."""
    lat_tag = tags.get('GPS GPSLatitude')
    lat_ref = tags.get('GPS GPSLatitudeRef')
    lon_tag = tags.get('GPS GPSLongitude')
    lon_ref = tags.get('GPS GPSLongitudeRef')
    if lat_tag is None or lat_ref is None or lon_tag is None or lon_ref is None:
        return None

    latitude = dms_to_decimal(lat_tag)
    longitude = dms_to_decimal(lon_tag)
    if latitude is None or longitude is None:
        return None

    if 'S' in str(lat_ref):
        latitude = -latitude
    if 'W' in str(lon_ref):
        longitude = -longitude

    return GPSCoordinate(latitude, longitude)


def normalize_date(raw: str) -> Optional[str]:
    """Reduce a timestamp string to its first 8 digits (YYYYMMDD)."""
    digits = ''.join(char for char in raw if '0' <= char <= '9')[:8]
    return digits if len(digits) == 8 else None


def extract_date_key(tags: Dict) -> Optional[str]:
    """Find the capture date, preferring DateTimeOriginal over DateTime."""
    for date_tag in DATE_TAGS:
        if date_tag in tags:
            return normalize_date(str(tags[date_tag]))
    return None


def extract_photo_metadata(filepath: Path) -> PhotoMetadata:
    """Read coordinates and capture date from a photo."""
    tags = read_exif_tags(filepath)
    return PhotoMetadata(
        filepath=filepath,
        coordinate=extract_coordinate(tags),
        date_key=extract_date_key(tags),
    )
