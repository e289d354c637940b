"""
Log Storage Paths Module

This module resolves where uploaded log files are written on disk.

Layout:
    <root>/<YYYY-MM-DD>/<unix_ts>_<sanitized_name>
    <root>/<YYYY-MM-DD>/<unix_ts>_<n>_<sanitized_name>   (name already taken)

Features:
- Daily directory resolution
- File name sanitization
- Timestamp prefixing
- Root confinement checks
- Timestamp recovery from stored names

Author: Logdrop Development Team
"""

import os
import re
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from logdrop.shared.errors import BadRequestError

DATE_FORMAT = "%Y-%m-%d"

# Characters that must never reach the filesystem inside a name component
_UNSAFE_CHARS = re.compile(r"[/\\\x00]")
_STORED_NAME = re.compile(r"^(\d+)_")


def daily_directory(root: Union[str, Path], now: Optional[datetime] = None) -> Path:
    """
    Get the upload directory for a calendar day.

    Args:
        root: Storage root
        now: Moment to resolve (defaults to current local time)

    Returns:
        Path: <root>/<YYYY-MM-DD>
    """
    now = now or datetime.now()
    return Path(root) / now.strftime(DATE_FORMAT)


def sanitize_filename(name: str) -> str:
    """
    Make an uploaded file name safe to use as a single path component.

    Path separators and NUL bytes become underscores. A result consisting
    only of dots ("." or "..") is replaced with underscores as well.
    """
    safe = _UNSAFE_CHARS.sub("_", name)
    if safe in (".", ".."):
        safe = "_" * len(safe)
    return safe


def stored_filename(name: str, timestamp: Optional[int] = None, counter: int = 0) -> str:
    """
    Build the on-disk name for an uploaded file.

    Args:
        name: Original file name as sent by the client
        timestamp: Unix timestamp in seconds (defaults to now)
        counter: Collision breaker, omitted when 0

    Returns:
        str: "<ts>_<name>" or "<ts>_<counter>_<name>"
    """
    if timestamp is None:
        timestamp = int(datetime.now().timestamp())
    safe = sanitize_filename(name)
    if counter:
        return f"{timestamp}_{counter}_{safe}"
    return f"{timestamp}_{safe}"


def ensure_within_root(root: Union[str, Path], path: Union[str, Path]) -> Path:
    """
    Canonicalize a destination path and confirm it stays under the root.

    Raises:
        BadRequestError: If the resolved path escapes the storage root
    """
    real_root = Path(os.path.realpath(root))
    real_path = Path(os.path.realpath(path))
    if real_path == real_root or real_root not in real_path.parents:
        raise BadRequestError(f"Invalid file name: {Path(path).name}")
    return real_path


def parse_upload_timestamp(stored_name: str) -> Optional[datetime]:
    """Recover the upload time encoded in a stored file name, if any."""
    match = _STORED_NAME.match(stored_name)
    if not match:
        return None
    return datetime.fromtimestamp(int(match.group(1)))
