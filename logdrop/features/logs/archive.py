"""
Log Archive Module

This module builds a ZIP archive holding every stored log file.

Features:
- Recursive storage walk
- Deterministic entry order
- DEFLATE compression
- Fixed entry permissions
- Bounded-memory buffering

Notes:
    Entry names are paths relative to the storage root with "/" separators.
    The archive is finalized before it is handed back, so a caller never
    sees a partially written archive.

Dependencies:
- zipfile for archive format
- tempfile for spooled buffering

Author: Logdrop Development Team
"""

from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Iterator, List, Optional, Union
import logging
import os
import stat
import tempfile
import zipfile

from logdrop.shared.errors import InternalError, NotFoundError

logger = logging.getLogger(__name__)

ENTRY_MODE = 0o644
CHUNK_SIZE = 64 * 1024
DEFAULT_SPOOL_BYTES = 32 * 1024 * 1024

# Earliest timestamp a ZIP entry can carry
_ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


def archive_filename(now: Optional[datetime] = None) -> str:
    """Download name for an archive built at `now`."""
    now = now or datetime.now()
    return f"logs_{now.strftime('%Y%m%d_%H%M%S')}.zip"


def _raise(error: OSError):
    raise error


def list_stored_files(root: Union[str, Path]) -> List[Path]:
    """
    List every regular file under the storage root.

    Symlinked directories are not descended into. Results are sorted so
    repeated downloads of the same tree produce the same entry order.
    """
    files = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        for filename in sorted(filenames):
            path = Path(dirpath) / filename
            if path.is_file():
                files.append(path)
    return files


def _entry_info(root: Path, path: Path) -> zipfile.ZipInfo:
    name = path.relative_to(root).as_posix()
    mtime = datetime.fromtimestamp(path.stat().st_mtime).timetuple()[:6]
    info = zipfile.ZipInfo(name, date_time=max(mtime, _ZIP_EPOCH))
    info.compress_type = zipfile.ZIP_DEFLATED
    info.external_attr = (stat.S_IFREG | ENTRY_MODE) << 16
    return info


def build_archive(root: Union[str, Path], spool_bytes: int = DEFAULT_SPOOL_BYTES) -> BinaryIO:
    """
    Build a ZIP archive of everything under the storage root.

    Args:
        root: Storage root
        spool_bytes: Size kept in memory before spilling to a temp file

    Returns:
        BinaryIO: Finished archive, positioned at the start. The caller
        owns the buffer and must close it.

    Raises:
        NotFoundError: If the storage root does not exist
        InternalError: On any read, write or finalize failure
    """
    root = Path(root)
    if not root.is_dir():
        logger.warning(f"Storage root {root} does not exist")
        raise NotFoundError()

    buffer = tempfile.SpooledTemporaryFile(max_size=spool_bytes)
    try:
        try:
            files = list_stored_files(root)
        except OSError as e:
            logger.error(f"Failed to list {root}: {str(e)}")
            raise InternalError("Failed to list stored files")

        zf = zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED)
        try:
            for path in files:
                try:
                    info = _entry_info(root, path)
                    data = path.read_bytes()
                except OSError as e:
                    logger.error(f"Failed to read {path}: {str(e)}")
                    raise InternalError(f"Failed to read file {path.relative_to(root).as_posix()}")

                try:
                    zf.writestr(info, data)
                except Exception as e:
                    raise InternalError(f"Failed to write archive entry {info.filename}: {str(e)}")
        finally:
            try:
                zf.close()
            except Exception as e:
                raise InternalError(f"Failed to finalize archive: {str(e)}")

        buffer.seek(0)
        logger.info(f"Built archive of {len(files)} file(s) from {root}")
        return buffer
    except Exception:
        buffer.close()
        raise


def iter_archive(buffer: BinaryIO, chunk_size: int = CHUNK_SIZE) -> Iterator[bytes]:
    """Yield a finished archive in chunks, closing it when exhausted."""
    try:
        while True:
            chunk = buffer.read(chunk_size)
            if not chunk:
                break
            yield chunk
    finally:
        buffer.close()
