"""
Magazine Portal Server - File Storage Management

This module handles uploaded submission files:
- Storage directory structure creation
- Type and size validation for uploads
- Streaming uploads into a per-user directory
- Path resolution for downloads
- Best-effort deletion used to compensate for failed submissions

Storage layout:
/upload_root/
  user_<id>/
    file-<millis>-<random>.<ext>

Paths stored in the database are relative to the upload root.
"""

import logging
import secrets
import time
from pathlib import Path, PurePosixPath
from typing import BinaryIO, Optional, Tuple

from config import DEFAULT_UPLOAD_ROOT
from exceptions import DependencyError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


# ==================== Storage Configuration ====================

DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024  # 10MB
CHUNK_SIZE = 1024 * 1024

# Accepted MIME types and the file type recorded for each
ALLOWED_MIME_TYPES = {
    "application/pdf": "pdf",
    "application/msword": "doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": "docx",
    "image/jpeg": "jpeg",
    "image/jpg": "jpg",
    "image/png": "png",
}

CONTENT_TYPES = {
    "pdf": "application/pdf",
    "doc": "application/msword",
    "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
}

INVALID_TYPE_MESSAGE = "Invalid file type. Only DOC, DOCX, PDF, JPG, JPEG, and PNG files are allowed."


# ==================== Storage Directory Management ====================

def InitializeStorage(storage_root: str = DEFAULT_UPLOAD_ROOT) -> None:
    """
    Initialize the upload storage root directory

    Args:
        storage_root: Root directory for uploaded files
    """
    storage_path = Path(storage_root)

    try:
        storage_path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Upload storage directory ready: {storage_path.absolute()}")

    except Exception as e:
        logger.error(f"Failed to initialize storage: {str(e)}")
        raise


def GetUserStoragePath(user_id: int, storage_root: str = DEFAULT_UPLOAD_ROOT) -> Path:
    """
    Get the storage directory for one user's uploads, creating it if needed

    Args:
        user_id: Owner of the uploads
        storage_root: Root directory for uploaded files

    Returns:
        Path: Absolute path to the user's directory
    """
    user_path = Path(storage_root) / f"user_{user_id}"
    user_path.mkdir(parents=True, exist_ok=True)
    return user_path.absolute()


def ResolveStoredFile(relative_path: str, storage_root: str = DEFAULT_UPLOAD_ROOT) -> Path:
    """
    Resolve a stored relative path to an absolute path inside the upload root

    Args:
        relative_path: Path as stored on the submission row
        storage_root: Root directory for uploaded files

    Returns:
        Path: Absolute path to the file

    Raises:
        NotFoundError: If the path escapes the upload root
    """
    root = Path(storage_root).resolve()
    file_path = (root / relative_path).resolve()

    if root != file_path and root not in file_path.parents:
        logger.warning(f"Rejected stored path outside upload root: {relative_path}")
        raise NotFoundError("File not found")

    return file_path


def GetFileType(filename: Optional[str], content_type: Optional[str]) -> str:
    """
    Determine the recorded file type for an upload

    Args:
        filename: Client-supplied file name
        content_type: Client-supplied MIME type

    Returns:
        str: One of pdf, doc, docx, jpeg, jpg, png

    Raises:
        ValidationError: If the MIME type is not accepted
    """
    if content_type not in ALLOWED_MIME_TYPES:
        raise ValidationError(INVALID_TYPE_MESSAGE)

    extension = Path(filename or "").suffix.lower().lstrip(".")
    if extension in CONTENT_TYPES and CONTENT_TYPES[extension] == CONTENT_TYPES[ALLOWED_MIME_TYPES[content_type]]:
        return extension

    return ALLOWED_MIME_TYPES[content_type]


def GetContentType(file_type: Optional[str]) -> str:
    """Map a recorded file type to the MIME type used for downloads"""
    return CONTENT_TYPES.get((file_type or "").lower(), "application/octet-stream")


# ==================== Upload Handling ====================

def StoreUpload(fileobj: BinaryIO, filename: Optional[str], content_type: Optional[str], user_id: int,
                storage_root: str = DEFAULT_UPLOAD_ROOT,
                max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES) -> Tuple[str, str, int]:
    """
    Validate and write an uploaded file into the owner's directory

    The file is streamed in chunks; a file that grows past max_bytes is
    removed before the error is raised.

    Args:
        fileobj: Readable binary file object
        filename: Client-supplied file name
        content_type: Client-supplied MIME type
        user_id: Owner of the upload
        storage_root: Root directory for uploaded files
        max_bytes: Size cap in bytes

    Returns:
        tuple: (relative_path, file_type, size_in_bytes)

    Raises:
        ValidationError: If the type is not accepted or the size cap is exceeded
        DependencyError: If the file cannot be written
    """
    file_type = GetFileType(filename, content_type)

    unique_suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10 ** 9)}"
    stored_name = f"file-{unique_suffix}.{file_type}"
    relative_path = str(PurePosixPath(f"user_{user_id}") / stored_name)

    size = 0
    try:
        target = GetUserStoragePath(user_id, storage_root) / stored_name
        with open(target, "wb") as f:
            while True:
                chunk = fileobj.read(CHUNK_SIZE)
                if not chunk:
                    break
                size += len(chunk)
                if size > max_bytes:
                    break
                f.write(chunk)
    except OSError as e:
        logger.error(f"Failed to write upload for user {user_id}: {str(e)}")
        DeleteStoredFile(relative_path, storage_root)
        raise DependencyError("Failed to store uploaded file")

    if size > max_bytes:
        DeleteStoredFile(relative_path, storage_root)
        raise ValidationError(f"File size exceeds the {max_bytes // (1024 * 1024)}MB limit")

    logger.info(f"Stored upload for user {user_id}: {relative_path} ({size} bytes)")
    return relative_path, file_type, size


def DeleteStoredFile(relative_path: str, storage_root: str = DEFAULT_UPLOAD_ROOT) -> bool:
    """
    Delete a stored file, logging rather than raising on failure

    Args:
        relative_path: Path as stored on the submission row
        storage_root: Root directory for uploaded files

    Returns:
        bool: True if the file was removed
    """
    try:
        file_path = ResolveStoredFile(relative_path, storage_root)
        file_path.unlink()
        logger.info(f"Deleted stored file {relative_path}")
        return True
    except FileNotFoundError:
        return False
    except Exception as e:
        logger.error(f"Error deleting stored file {relative_path}: {str(e)}")
        return False
