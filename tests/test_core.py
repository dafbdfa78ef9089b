from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from geopy.exc import GeocoderServiceError
from geopy.location import Location

from geo_photo_rename.core import PhotoRenamer, Status, iter_photos
from geo_photo_rename.location import LocationResolver
from geo_photo_rename.metadata import GPSCoordinate, PhotoMetadata

PARIS_RAW = {
    "display_name": "Paris, Ile-de-France, Metropolitan France, France",
    "address": {"town": "Paris", "state": "Ile-de-France", "country": "France", "country_code": "fr"},
}


def paris_location():
    return Location("Paris, France", (48.8566, 2.3522), PARIS_RAW)


@pytest.fixture
def geocoder():
    geocoder = MagicMock()
    geocoder.reverse.return_value = paris_location()
    return geocoder


@pytest.fixture
def sleep():
    return MagicMock()


@pytest.fixture
def renamer(geocoder, sleep):
    return PhotoRenamer(LocationResolver(geocoder), sleep=sleep)


def make_photo(directory: Path, name: str) -> Path:
    photo = directory / name
    photo.write_bytes(b"fake jpeg")
    return photo


def located(filepath, date_key="20240115"):
    return PhotoMetadata(filepath, GPSCoordinate(48.8566, 2.3522), date_key)


def test_end_to_end_rename(tmp_path, geocoder, sleep, paris_tags):
    photo = make_photo(tmp_path, "IMG_0001.jpg")
    renamer = PhotoRenamer(LocationResolver(geocoder), sleep=sleep)

    with patch("geo_photo_rename.metadata.exifread.process_file", return_value=paris_tags):
        summary = renamer.process_directory(tmp_path)

    assert summary.renamed == 1
    assert not photo.exists()
    assert (tmp_path / "20240115_1_FR_Paris.jpg").read_bytes() == b"fake jpeg"
    sleep.assert_called_once_with(1.0)


def test_sequence_skips_failed_lookup(tmp_path, geocoder, renamer):
    photos = [make_photo(tmp_path, f"IMG_000{i}.jpg") for i in range(1, 4)]
    geocoder.reverse.side_effect = [
        paris_location(),
        GeocoderServiceError("timeout"),
        paris_location(),
    ]

    with patch.object(renamer, "extract_metadata", side_effect=located):
        results = [renamer.process_file(photo) for photo in photos]

    assert [r.status for r in results] == [Status.RENAMED, Status.FAILED, Status.RENAMED]
    assert results[0].new_path.name == "20240115_1_FR_Paris.jpg"
    assert results[2].new_path.name == "20240115_2_FR_Paris.jpg"
    assert photos[1].exists()


def test_missing_metadata_skips_without_lookup(tmp_path, geocoder, sleep, renamer):
    photo = make_photo(tmp_path, "no_gps.jpg")

    with patch.object(renamer, "extract_metadata", return_value=PhotoMetadata(photo, None, "20240115")):
        result = renamer.process_file(photo)

    assert result.status is Status.SKIPPED
    assert photo.exists()
    geocoder.reverse.assert_not_called()
    sleep.assert_not_called()
    assert renamer.sequence == 1


def test_missing_date_skips(tmp_path, geocoder, renamer):
    photo = make_photo(tmp_path, "no_date.jpg")

    with patch.object(renamer, "extract_metadata", return_value=located(photo, date_key=None)):
        result = renamer.process_file(photo)

    assert result.status is Status.SKIPPED
    geocoder.reverse.assert_not_called()


def test_unreadable_exif_is_skipped(tmp_path, renamer):
    photo = make_photo(tmp_path, "broken.jpg")

    with patch.object(renamer, "extract_metadata", side_effect=ValueError("bad IFD")):
        result = renamer.process_file(photo)

    assert result.status is Status.SKIPPED
    assert "bad IFD" in result.reason


def test_delay_before_every_lookup_even_after_failure(tmp_path, geocoder, sleep, renamer):
    photos = [make_photo(tmp_path, name) for name in ("a.jpg", "b.jpg")]
    geocoder.reverse.side_effect = [GeocoderServiceError("down"), paris_location()]

    with patch.object(renamer, "extract_metadata", side_effect=located):
        for photo in photos:
            renamer.process_file(photo)

    assert sleep.call_count == 2
    sleep.assert_called_with(1.0)


def test_existing_target_is_not_overwritten(tmp_path, renamer):
    photo = make_photo(tmp_path, "IMG_0001.jpg")
    existing = tmp_path / "20240115_1_FR_Paris.jpg"
    existing.write_bytes(b"other photo")

    with patch.object(renamer, "extract_metadata", side_effect=located):
        result = renamer.process_file(photo)

    assert result.status is Status.FAILED
    assert photo.exists()
    assert existing.read_bytes() == b"other photo"
    assert renamer.sequence == 1


def test_rename_error_does_not_stop_batch(tmp_path, renamer):
    first = make_photo(tmp_path, "first.jpg")
    second = make_photo(tmp_path, "second.jpg")
    real_rename = Path.rename
    calls = []

    def flaky_rename(self, target):
        calls.append(self)
        if len(calls) == 1:
            raise PermissionError("denied")
        return real_rename(self, target)

    with patch.object(renamer, "extract_metadata", side_effect=located), \
            patch.object(Path, "rename", flaky_rename):
        results = [renamer.process_file(first), renamer.process_file(second)]

    assert [r.status for r in results] == [Status.FAILED, Status.RENAMED]
    assert "denied" in results[0].reason
    assert first.exists()
    assert results[1].new_path.name == "20240115_1_FR_Paris.jpg"


def test_dry_run_leaves_files_alone(tmp_path, geocoder, sleep):
    photo = make_photo(tmp_path, "IMG_0001.jpg")
    renamer = PhotoRenamer(LocationResolver(geocoder), dry_run=True, sleep=sleep)

    with patch.object(renamer, "extract_metadata", side_effect=located):
        result = renamer.process_file(photo)

    assert result.status is Status.RENAMED
    assert result.new_path.name == "20240115_1_FR_Paris.jpg"
    assert photo.exists()
    assert renamer.sequence == 2


def test_iter_photos_filters_by_extension(tmp_path):
    for name in ("a.jpg", "b.JPEG", "c.png", "d.txt", "jpg"):
        make_photo(tmp_path, name)
    (tmp_path / "nested.jpg").mkdir()

    names = sorted(p.name for p in iter_photos(tmp_path))
    assert names == ["a.jpg", "b.JPEG"]


def test_process_directory_requires_directory(tmp_path, renamer):
    with pytest.raises(NotADirectoryError):
        renamer.process_directory(tmp_path / "missing")


def test_process_directory_summary(tmp_path, renamer):
    make_photo(tmp_path, "with_gps.jpg")
    make_photo(tmp_path, "notes.txt")

    with patch.object(renamer, "extract_metadata", side_effect=located):
        summary = renamer.process_directory(tmp_path)

    assert len(summary.results) == 1
    assert (summary.renamed, summary.skipped, summary.failed) == (1, 0, 0)
    assert (tmp_path / "notes.txt").exists()


def test_decoder_bug_is_not_reported_as_unreadable_exif(tmp_path, renamer):
    photo = make_photo(tmp_path, "IMG_0001.jpg")

    with patch.object(renamer, "extract_metadata", side_effect=TypeError("unsupported operand")):
        with pytest.raises(TypeError):
            renamer.process_file(photo)


def test_missing_file_is_skipped(tmp_path, renamer):
    result = renamer.process_file(tmp_path / "vanished.jpg")

    assert result.status is Status.SKIPPED
    assert result.reason.startswith("unreadable EXIF")
