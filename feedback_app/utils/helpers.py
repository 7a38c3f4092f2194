from datetime import datetime, timezone
from typing import Optional
import secrets
import uuid

def get_utc_now() -> datetime:
    """Get current UTC datetime"""
    return datetime.now(timezone.utc)

def as_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Attach UTC to naive datetimes, as SQLite returns them"""
    if dt is not None and dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt

def format_datetime(dt: Optional[datetime]) -> str:
    """Format datetime to ISO 8601, treating naive values as UTC.

    Returns an empty string for a missing datetime.
    """
    if dt is None:
        return ""
    return as_utc(dt).isoformat()

def generate_object_id() -> str:
    """Generate a 24 character hex identifier for stored records"""
    return secrets.token_hex(12)

def generate_public_id() -> str:
    """Generate the opaque public identifier used in shareable form links"""
    return str(uuid.uuid4())

UNSAFE_FILENAME_CHARS = set('<>:"/\\|?*')

def sanitize_filename(filename: str) -> str:
    """Reduce free text to an ASCII attachment name, spaces as underscores"""
    kept = "".join(
        char for char in filename
        if char.isascii() and char.isprintable() and char not in UNSAFE_FILENAME_CHARS
    )
    return kept.strip().replace(" ", "_")
