from pathlib import Path
from typing import List, Optional, Union
from datetime import datetime, timezone
from urllib.parse import quote
import hashlib
import logging
import os

import aiofiles
from fastapi import UploadFile

from filedrop import config
from filedrop.exceptions import StorageNameExhaustedError, StorageReadError
from filedrop.models.stored_file import StoredFile
from filedrop.schemas.upload_schemas import FileListingEntry
from filedrop.services.naming import NamingStrategy, disambiguate, generate_filename

logger = logging.getLogger(__name__)


def is_image_filename(filename: str) -> bool:
    """Classify a stored filename as an image by its extension"""
    return os.path.splitext(filename)[1].lower() in config.IMAGE_EXTENSIONS


class StorageService:
    """
    Ingestion and listing over a single storage directory.

    The directory is the only source of truth: nothing is cached, every
    listing re-scans it and every upload goes to a fresh name created with
    exclusive-create semantics.
    """

    def __init__(
        self,
        upload_dir: Optional[Union[str, Path]] = None,
        naming_strategy: Union[NamingStrategy, str] = config.NAMING_STRATEGY,
        static_prefix: str = config.STATIC_PREFIX,
        max_name_attempts: int = config.MAX_NAME_ATTEMPTS,
        chunk_size: int = config.CHUNK_SIZE,
    ):
        self.upload_dir = Path(upload_dir or config.UPLOAD_DIR).resolve()
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        self.naming_strategy = NamingStrategy(naming_strategy)
        self.static_prefix = static_prefix.rstrip("/")
        self.max_name_attempts = max_name_attempts
        self.chunk_size = chunk_size

    def get_file_path(self, stored_filename: str) -> Path:
        """Get full path to stored file"""
        return self.upload_dir / stored_filename

    def public_url(self, stored_filename: str) -> str:
        return f"{self.static_prefix}/{quote(stored_filename)}"

    async def _open_new_file(self, base_name: str):
        """
        Create a file that did not exist before, trying disambiguated names
        when the generated one is taken.

        Returns the stored filename, its path and the open aiofiles handle.
        """
        for attempt in range(self.max_name_attempts):
            stored_filename = disambiguate(base_name, attempt)
            file_path = self.get_file_path(stored_filename)
            try:
                # "x" fails instead of truncating a file that is already there
                handle = await aiofiles.open(file_path, "xb")
            except FileExistsError:
                logger.warning(f"Generated name already taken, retrying: {stored_filename}")
                continue
            return stored_filename, file_path, handle

        raise StorageNameExhaustedError(base_name, self.max_name_attempts)

    async def _hash_upload(self, upload: UploadFile) -> str:
        digest = hashlib.sha256()
        await upload.seek(0)
        while True:
            chunk = await upload.read(self.chunk_size)
            if not chunk:
                break
            digest.update(chunk)
        await upload.seek(0)
        return digest.hexdigest()

    def _stored_file(self, stored_filename, file_path, size, mimetype, field_name, original_filename):
        logger.info(f"Stored upload {original_filename!r} as {stored_filename} ({size} bytes)")
        return StoredFile(
            filename=stored_filename,
            path=str(file_path),
            size=size,
            mimetype=mimetype or config.DEFAULT_MIMETYPE,
            fieldname=field_name,
            original_filename=original_filename,
        )

    async def save_upload(
        self,
        upload: UploadFile,
        field_name: str = config.UPLOAD_FIELD_NAME,
    ) -> StoredFile:
        """
        Copy an uploaded part to disk chunk by chunk under a generated name.

        The content-hash strategy reads the part twice: once to hash it,
        once to write it.
        """
        digest = None
        if self.naming_strategy is NamingStrategy.CONTENT_HASH:
            digest = await self._hash_upload(upload)
        base_name = generate_filename(
            field_name, upload.filename, self.naming_strategy, digest=digest
        )

        stored_filename, file_path, handle = await self._open_new_file(base_name)
        size = 0
        try:
            while True:
                chunk = await upload.read(self.chunk_size)
                if not chunk:
                    break
                size += len(chunk)
                await handle.write(chunk)
        finally:
            await handle.close()

        return self._stored_file(
            stored_filename, file_path, size, upload.content_type, field_name, upload.filename
        )

    async def save_bytes(
        self,
        content: bytes,
        original_filename: Optional[str] = None,
        mimetype: Optional[str] = None,
        field_name: str = config.UPLOAD_FIELD_NAME,
    ) -> StoredFile:
        base_name = generate_filename(
            field_name, original_filename, self.naming_strategy, content
        )

        stored_filename, file_path, handle = await self._open_new_file(base_name)
        try:
            await handle.write(content)
        finally:
            await handle.close()

        return self._stored_file(
            stored_filename, file_path, len(content), mimetype, field_name, original_filename
        )

    def list_files(self) -> List[FileListingEntry]:
        """
        Scan the storage directory (non-recursive) and stat every entry.

        Entries are sorted by filename. Any failure to enumerate the
        directory or stat an entry raises StorageReadError.
        """
        try:
            with os.scandir(self.upload_dir) as it:
                entries = sorted(it, key=lambda entry: entry.name)

            files = []
            for entry in entries:
                stats = entry.stat()
                files.append(
                    FileListingEntry(
                        filename=entry.name,
                        size=stats.st_size,
                        mtime=datetime.fromtimestamp(stats.st_mtime, tz=timezone.utc),
                        url=self.public_url(entry.name),
                        is_image=is_image_filename(entry.name),
                    )
                )
            return files
        except OSError as e:
            logger.error(f"Error reading storage directory {self.upload_dir}: {e}")
            raise StorageReadError(str(e))
