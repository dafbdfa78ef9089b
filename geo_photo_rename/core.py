"""
Core pipeline: scan a directory, resolve each photo's location and rename it.
"""

import enum
import sys
import time
from pathlib import Path
from typing import Callable, Iterator, List, NamedTuple, Optional

from .location import LocationLookupError, LocationResolver, derive_location_text
from .metadata import EXIF_READ_ERRORS, PhotoMetadata, extract_photo_metadata
from .naming import NamingScheme, RenamePlan

JPEG_EXTENSIONS = ('.jpg', '.jpeg')

# Minimum pause before every geocoding request, in seconds
REQUEST_DELAY = 1.0


class Status(enum.Enum):
    RENAMED = 'renamed'
    SKIPPED = 'skipped'
    FAILED = 'failed'


class FileResult(NamedTuple):
    """Outcome of processing a single file."""
    filepath: Path
    status: Status
    reason: Optional[str] = None
    new_path: Optional[Path] = None


class RunSummary(NamedTuple):
    results: List[FileResult]

    def count(self, status: Status) -> int:
        return sum(1 for result in self.results if result.status is status)

    @property
    def renamed(self) -> int:
        return self.count(Status.RENAMED)

    @property
    def skipped(self) -> int:
        return self.count(Status.SKIPPED)

    @property
    def failed(self) -> int:
        return self.count(Status.FAILED)


def is_jpeg(filepath: Path) -> bool:
    return filepath.suffix.lower() in JPEG_EXTENSIONS


def iter_photos(directory: Path) -> Iterator[Path]:
    """
    Yield JPEG files directly inside ``directory``.

    Entries come in the order the filesystem lists them, which differs
    between platforms; no sorting is applied.
    """
    for entry in directory.iterdir():
        if entry.is_file() and is_jpeg(entry):
            yield entry


class PhotoRenamer:
    """
    Rename JPEG photos as date, sequence, country and place name.

    Files are handled one at a time. The sequence counter advances only
    after a successful rename, and every lookup is preceded by a fixed
    delay to stay within the geocoding provider's rate limit.
    """

    def __init__(
        self,
        resolver: LocationResolver,
        scheme: NamingScheme = NamingScheme.SEQUENCE,
        dry_run: bool = False,
        request_delay: float = REQUEST_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Args:
            resolver: turns coordinates into geocode results
            scheme: filename layout to produce
            dry_run: if True, only show what would be renamed
            request_delay: seconds to wait before each geocoding request
            sleep: function used to wait
        """
        self.resolver = resolver
        self.scheme = scheme
        self.dry_run = dry_run
        self.request_delay = request_delay
        self.sleep = sleep
        self.sequence = 1

    def extract_metadata(self, filepath: Path) -> PhotoMetadata:
        return extract_photo_metadata(filepath)

    def process_file(self, filepath: Path) -> FileResult:
        """Run a single photo through extraction, lookup and rename."""
        print(f"Processing: {filepath}")

        try:
            metadata = self.extract_metadata(filepath)
        except EXIF_READ_ERRORS as e:
            print(f"  Could not read EXIF data: {e}")
            return FileResult(filepath, Status.SKIPPED, f"unreadable EXIF: {e}")

        if metadata.coordinate is None or metadata.date_key is None:
            print("  Missing GPS or Date metadata.")
            return FileResult(filepath, Status.SKIPPED, "missing GPS or date metadata")

        coordinate = metadata.coordinate
        print(f"  Found coordinates: {coordinate.latitude}, {coordinate.longitude}")
        print(f"  Found date: {metadata.date_key}")

        self.sleep(self.request_delay)
        try:
            result = self.resolver.resolve(coordinate)
        except LocationLookupError as e:
            print(f"  Error getting location: {e}", file=sys.stderr)
            return FileResult(filepath, Status.FAILED, f"location lookup failed: {e}")

        plan = RenamePlan(
            original_path=filepath,
            date_key=metadata.date_key,
            sequence_number=self.sequence,
            country_code=result.country_code,
            location_text=derive_location_text(result),
        )
        new_path = plan.target_path(self.scheme)

        if new_path != filepath and new_path.exists():
            print(f"  Error renaming: target already exists: {new_path.name}", file=sys.stderr)
            return FileResult(filepath, Status.FAILED, "target already exists", new_path)

        print(f"  {'Would rename' if self.dry_run else 'Renaming'} to: {new_path}")
        if not self.dry_run:
            try:
                filepath.rename(new_path)
            except OSError as e:
                print(f"  Error renaming: {e}", file=sys.stderr)
                return FileResult(filepath, Status.FAILED, f"rename failed: {e}", new_path)

        self.sequence += 1
        return FileResult(filepath, Status.RENAMED, new_path=new_path)

    def process_directory(self, directory: Path) -> RunSummary:
        """Process every JPEG directly inside ``directory``."""
        if not directory.is_dir():
            raise NotADirectoryError(f"Provided path is not a directory: {directory}")

        # Snapshot the listing so renamed files are not picked up again
        photos = list(iter_photos(directory))
        results = [self.process_file(filepath) for filepath in photos]
        summary = RunSummary(results)

        print(f"\n{'Dry run' if self.dry_run else 'Processing'} completed: "
              f"{summary.renamed} renamed, {summary.skipped} skipped, {summary.failed} failed")
        return summary
