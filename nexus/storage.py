"""On-disk storage for document vault uploads."""

import logging
import uuid
from pathlib import Path
from typing import BinaryIO, Optional

from .errors import FileTooLargeError, UnsupportedFileTypeError
from .models import StoredFile

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/plain",
    "image/jpeg",
    "image/png",
    "image/gif",
}

CHUNK_SIZE = 1024 * 1024


class DocumentStorage:
    """Saves uploads under ``root/<company_id>/`` with unique file names."""

    def __init__(self, root: str, max_bytes: int):
        self.root = Path(root)
        self.max_bytes = max_bytes

    def check_mime_type(self, mime_type: Optional[str]) -> str:
        if mime_type not in ALLOWED_MIME_TYPES:
            raise UnsupportedFileTypeError(f"Invalid file type: {mime_type}")
        return mime_type

    def save(
        self,
        company_id: int,
        stream: BinaryIO,
        original_file_name: str,
        mime_type: Optional[str],
    ) -> StoredFile:
        """Copy ``stream`` to disk, enforcing the type allow-list and size cap."""
        self.check_mime_type(mime_type)
        extension = Path(original_file_name or "").suffix.lower() or None
        file_name = f"document-{uuid.uuid4().hex}{extension or ''}"
        directory = self.root / str(company_id)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / file_name

        size = 0
        with open(path, "wb") as out:
            while True:
                chunk = stream.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > self.max_bytes:
                    out.close()
                    path.unlink(missing_ok=True)
                    raise FileTooLargeError(self.max_bytes)
                out.write(chunk)

        logger.info(f"Stored upload {original_file_name} as {path} ({size} bytes)")
        return StoredFile(
            file_name=file_name,
            original_file_name=original_file_name or file_name,
            file_path=str(path),
            file_size=size,
            mime_type=mime_type,
            file_extension=extension.lstrip(".") if extension else None,
        )

    def exists(self, file_path: str) -> bool:
        return Path(file_path).is_file()

    def delete(self, file_path: str) -> bool:
        """Remove a stored file; returns False if it was already gone."""
        path = Path(file_path)
        if not path.is_file():
            logger.warning(f"Stored file not found for deletion: {path}")
            return False
        path.unlink()
        logger.info(f"Deleted stored file {path}")
        return True
