"""
Geo Photo Rename - rename JPEG photos by capture date and location.

This package provides functionality to:
- Extract GPS coordinates and capture dates from JPEG EXIF data
- Convert coordinates to readable place names via reverse geocoding
- Rename files as date, sequence, country code and place name
"""

__version__ = "1.0.0"

from .core import FileResult, PhotoRenamer, RunSummary, Status
from .naming import NamingScheme

__all__ = ["PhotoRenamer", "FileResult", "RunSummary", "Status", "NamingScheme"]
