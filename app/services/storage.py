"""
Local filesystem storage for profile pictures.
"""

import base64
import binascii
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple
from uuid import UUID

from app.services.errors import InputError, StorageError

logger = logging.getLogger(__name__)

PUBLIC_PREFIX = "/api/uploads/profile_pictures"

EXTENSIONS_BY_TYPE = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
}

MEDIA_TYPES_BY_EXTENSION = {
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
}

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def strip_data_url(image_data: str) -> str:
    """Drop a `data:image/...;base64,` prefix if present."""
    if "," in image_data:
        return image_data.split(",", 1)[1]
    return image_data


def decode_image(image_data: str) -> bytes:
    try:
        return base64.b64decode(strip_data_url(image_data).strip(), validate=True)
    except (binascii.Error, ValueError):
        raise InputError("Invalid base64 image data")


def safe_filename(filename: str) -> str:
    """Reduce a requested name to its final path component."""
    return Path(filename.replace("\\", "/")).name


def media_type_for(filename: str) -> str:
    extension = Path(filename).suffix.lstrip(".").lower()
    return MEDIA_TYPES_BY_EXTENSION.get(extension, DEFAULT_MEDIA_TYPE)


@dataclass
class StoredPicture:
    """A decoded upload held under a temporary name until committed."""

    path: Path
    filename: str
    staged_path: Optional[Path] = None

    @property
    def public_url(self) -> str:
        return f"{PUBLIC_PREFIX}/{self.filename}"


class ProfilePictureStorage:
    def __init__(self, upload_dir: str):
        self.upload_dir = Path(upload_dir)

    def save(self, user_id: UUID, content_type: str, image_data: str) -> StoredPicture:
        """
        Decode and write the upload next to its final name. The live picture
        is untouched until `commit`.
        """
        extension = EXTENSIONS_BY_TYPE.get(content_type)
        if extension is None:
            raise InputError("Invalid file type. Only JPEG, PNG, GIF, and WEBP are allowed.")

        image_bytes = decode_image(image_data)
        filename = f"{user_id}_profile.{extension}"

        try:
            self.upload_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Failed to create upload directory {self.upload_dir}: {str(e)}")
            raise StorageError("Failed to prepare file storage") from e

        try:
            with tempfile.NamedTemporaryFile(dir=self.upload_dir, prefix=f".{filename}.", suffix=".tmp", delete=False) as f:
                f.write(image_bytes)
                staged_path = Path(f.name)
        except OSError as e:
            logger.error(f"Failed to stage upload for {filename}: {str(e)}")
            raise StorageError("Failed to save profile picture") from e

        logger.info(f"Staged {len(image_bytes)} bytes for {filename}")
        return StoredPicture(path=self.upload_dir / filename, filename=filename, staged_path=staged_path)

    def commit(self, user_id: UUID, picture: StoredPicture) -> None:
        """Move the staged file onto its final name and drop older pictures of other types."""
        try:
            os.replace(picture.staged_path, picture.path)
        except OSError as e:
            logger.error(f"Failed to move {picture.staged_path} to {picture.path}: {str(e)}")
            self.discard(picture)
            raise StorageError("Failed to save profile picture") from e

        for extension in set(EXTENSIONS_BY_TYPE.values()):
            stale = self.upload_dir / f"{user_id}_profile.{extension}"
            if stale == picture.path:
                continue
            try:
                stale.unlink(missing_ok=True)
            except OSError as e:
                logger.error(f"Failed to remove old picture {stale}: {str(e)}")

    def discard(self, picture: StoredPicture) -> None:
        if picture.staged_path is None:
            return
        try:
            picture.staged_path.unlink(missing_ok=True)
        except OSError as e:
            logger.error(f"Failed to remove staged upload {picture.staged_path}: {str(e)}")

    def resolve(self, filename: str) -> Optional[Tuple[Path, str]]:
        """Path and media type of a stored picture, or None if absent."""
        name = safe_filename(filename)
        # Dot files are uploads still being staged
        if not name or name.startswith("."):
            return None
        path = self.upload_dir / name
        if not path.is_file():
            return None
        return path, media_type_for(name)
