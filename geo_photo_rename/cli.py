#!/usr/bin/env python3
"""
Command-line interface for geo_photo_rename.
"""

import argparse
import sys
from pathlib import Path

from . import __version__
from .config import ConfigurationError, load_settings
from .core import PhotoRenamer
from .location import LocationResolver, MapsCo
from .naming import NamingScheme


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="geo_photo_rename",
        description="Rename JPEG photos by capture date and GPS location",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  geo_photo_rename /path/to/photos
  geo_photo_rename --dry-run .
  geo_photo_rename --scheme stem ~/Pictures/trip

The tool will:
1. Read GPS coordinates and capture date from each JPEG's EXIF data
2. Look up the place name for the coordinates (one request per second)
3. Rename files as: YYYYMMDD_Sequence_COUNTRYCODE_Place, Road.jpg
   (or "OriginalName, Place, Road.jpg" with --scheme stem)

Configuration:
  GEOCODE_API_KEY      API key for geocode.maps.co (required)
  GEOCODE_USER_AGENT   User-Agent sent with geocoding requests
Both may also be set in a .env file in the current directory.
        """
    )

    parser.add_argument(
        'directory',
        nargs='?',
        default='.',
        help='Directory containing JPEG files (default: current directory)'
    )

    parser.add_argument(
        '--scheme',
        choices=[scheme.value for scheme in NamingScheme],
        default=NamingScheme.SEQUENCE.value,
        help='Filename layout (default: %(default)s)'
    )

    parser.add_argument(
        '--dry-run',
        action='store_true',
        help='Show what would be renamed without actually renaming files'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}'
    )

    return parser


def main(argv=None):
    """Main entry point for the geo_photo_rename command."""
    args = build_parser().parse_args(argv)

    directory = Path(args.directory)
    if not directory.is_dir():
        print("Error: Provided path is not a directory.", file=sys.stderr)
        sys.exit(1)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Geo Photo Rename v{__version__}")
    print(f"Mode: {'DRY RUN' if args.dry_run else 'RENAME FILES'}")
    print("-" * 50)

    geocoder = MapsCo(settings.api_key, user_agent=settings.user_agent)
    renamer = PhotoRenamer(
        LocationResolver(geocoder),
        scheme=NamingScheme(args.scheme),
        dry_run=args.dry_run,
    )

    try:
        summary = renamer.process_directory(directory)
    except KeyboardInterrupt:
        print("\n\nOperation cancelled by user.")
        sys.exit(1)

    if summary.failed:
        sys.exit(1)


if __name__ == '__main__':
    main()
