"""
Filename composition for renamed photos.
"""

import enum
import unicodedata
from pathlib import Path
from typing import NamedTuple


class NamingScheme(enum.Enum):
    """How the new filename is assembled."""
    SEQUENCE = 'sequence'
    STEM = 'stem'


class RenamePlan(NamedTuple):
    original_path: Path
    date_key: str
    sequence_number: int
    country_code: str
    location_text: str

    @property
    def extension(self) -> str:
        return self.original_path.suffix[1:]

    def filename(self, scheme: NamingScheme) -> str:
        return compose_filename(self, scheme)

    def target_path(self, scheme: NamingScheme) -> Path:
        return self.original_path.with_name(self.filename(scheme))


def _is_filename_safe(char: str) -> bool:
    # Combining marks carry vowel signs in Indic and Thai scripts
    return char.isalnum() or char in ' ,' or unicodedata.category(char) in ('Mn', 'Mc')


def sanitize_location(text: str) -> str:
    """Replace characters other than letters, digits, spaces and commas with
    underscores, then collapse whitespace runs."""
    cleaned = ''.join(char if _is_filename_safe(char) else '_' for char in text)
    return ' '.join(cleaned.split())


def compose_filename(plan: RenamePlan, scheme: NamingScheme = NamingScheme.SEQUENCE) -> str:
    location = sanitize_location(plan.location_text)
    if scheme is NamingScheme.STEM:
        return f"{plan.original_path.stem}, {location}.{plan.extension}"
    return f"{plan.date_key}_{plan.sequence_number}_{plan.country_code}_{location}.{plan.extension}"
