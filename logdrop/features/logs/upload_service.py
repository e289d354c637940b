"""
Log Upload Service Module

This module provides the business logic for persisting uploaded log files
into the daily storage directories.

Features:
- Multipart form processing
- Daily directory creation
- Exclusive file creation
- Collision handling
- Rollback of failed requests

Data Model:
- One stored file per uploaded part
- Parts processed in the order received

Dependencies:
- aiofiles for non-blocking disk I/O
- starlette for form data types
- logging for tracking

Author: Logdrop Development Team
"""

from datetime import datetime
from pathlib import Path
from typing import List, Optional, Union
import logging

import aiofiles
import aiofiles.os
from starlette.datastructures import FormData, UploadFile

from logdrop.shared.errors import BadRequestError, InternalError
from .storage import daily_directory, ensure_within_root, stored_filename

logger = logging.getLogger(__name__)

# Upper bound on "<ts>_<n>_<name>" attempts for a single part
MAX_NAME_ATTEMPTS = 1000


class LogUploadService:
    """
    Log upload handler.

    Writes uploaded parts under the storage root. A request either stores
    every part or, on the first failing part, removes the files it already
    wrote and re-raises the error.

    Attributes:
        storage_root (Path): Top-level directory for stored logs
    """

    def __init__(self, storage_root: Union[str, Path]):
        self.storage_root = Path(storage_root)

    async def save_form(self, form: FormData, now: Optional[datetime] = None) -> List[Path]:
        """
        Store every file part of a parsed multipart form.

        Args:
            form (FormData): Parsed request form
            now (datetime): Moment used for directory and name resolution

        Returns:
            List[Path]: Stored file paths, in part order

        Raises:
            BadRequestError: Missing field/file name, unreadable part, no files
            InternalError: Directory or file write failures
        """
        saved: List[Path] = []

        try:
            for field_name, value in form.multi_items():
                if not field_name:
                    raise BadRequestError("Field name is missing")

                if not isinstance(value, UploadFile) or not value.filename:
                    raise BadRequestError("File name is missing")

                try:
                    data = await value.read()
                except Exception as e:
                    raise BadRequestError(f"Failed to read file data: {str(e)}")

                file_path = await self.save_file(value.filename, data, now=now)
                saved.append(file_path)
                logger.info(f"File uploaded: {value.filename} -> {file_path}")
        except BaseException:
            # Includes cancellation when the client disconnects mid-request
            await self.rollback(saved)
            raise

        if not saved:
            raise BadRequestError("No file was uploaded")

        return saved

    async def save_file(self, original_name: str, data: bytes, now: Optional[datetime] = None) -> Path:
        """
        Write one file into the daily directory.

        Args:
            original_name (str): File name sent by the client
            data (bytes): File content
            now (datetime): Moment used for directory and name resolution

        Returns:
            Path: Where the file was written

        Notes:
            - Creates the daily directory on first use
            - Never overwrites an existing file
        """
        now = now or datetime.now()
        upload_dir = daily_directory(self.storage_root, now)

        try:
            await aiofiles.os.makedirs(upload_dir, exist_ok=True)
        except OSError as e:
            raise InternalError(f"Failed to create directory: {str(e)}")

        timestamp = int(now.timestamp())
        for counter in range(MAX_NAME_ATTEMPTS):
            file_path = upload_dir / stored_filename(original_name, timestamp, counter)
            ensure_within_root(self.storage_root, file_path)
            try:
                f = await aiofiles.open(file_path, "xb")
            except FileExistsError:
                continue
            except OSError as e:
                raise InternalError(f"Failed to save file: {str(e)}")

            # The file exists from here on; a failed write must not leave it behind
            try:
                async with f:
                    await f.write(data)
            except OSError as e:
                await self.rollback([file_path])
                raise InternalError(f"Failed to save file: {str(e)}")
            except BaseException:
                await self.rollback([file_path])
                raise
            return file_path

        raise InternalError(f"Failed to save file: no free name for {original_name}")

    async def rollback(self, paths: List[Path]):
        """Remove files stored earlier in a request that failed."""
        for path in paths:
            try:
                await aiofiles.os.remove(path)
                logger.info(f"Rolled back upload: {path}")
            except OSError as e:
                logger.error(f"Failed to roll back {path}: {str(e)}")
