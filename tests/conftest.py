from fractions import Fraction

import pytest


class FakeTag:
    """Minimal stand-in for exifread's IfdTag."""

    def __init__(self, printable, values=None, field_type=2):
        self.printable = printable
        self.values = values if values is not None else printable
        self.field_type = field_type

    def __str__(self):
        return self.printable


def rational_tag(*values):
    ratios = [Fraction(v) for v in values]
    return FakeTag(str(ratios), values=ratios, field_type=5)


def gps_tags(lat, lat_ref, lon, lon_ref):
    return {
        'GPS GPSLatitude': rational_tag(*lat),
        'GPS GPSLatitudeRef': FakeTag(lat_ref),
        'GPS GPSLongitude': rational_tag(*lon),
        'GPS GPSLongitudeRef': FakeTag(lon_ref),
    }


@pytest.fixture
def paris_tags():
    tags = gps_tags(
        (48, 51, Fraction(2376, 100)), 'N',
        (2, 21, Fraction(792, 100)), 'E',
    )
    tags['EXIF DateTimeOriginal'] = FakeTag('2024:01:15 10:00:00')
    return tags
