"""Image storage for catalog devices — local filesystem, served under /uploads."""

import os
import uuid
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import structlog
from fastapi import UploadFile

from smartwatt.config import get_settings
from smartwatt.core.exceptions import ValidationException

logger = structlog.get_logger(__name__)

IMAGES_SUBDIR = "images"
PUBLIC_PREFIX = "/uploads"
CHUNK_SIZE = 64 * 1024

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


@dataclass(frozen=True)
class StoredImage:
    filename: str
    path: str
    url: str


class ImageStorage:
    """Validates and persists uploaded images under ``<root>/images``."""

    def __init__(self, root: str, max_size_bytes: int):
        self.root = root
        self.directory = os.path.join(root, IMAGES_SUBDIR)
        self.max_size_bytes = max_size_bytes

    def url_for(self, filename: str) -> str:
        return f"{PUBLIC_PREFIX}/{IMAGES_SUBDIR}/{filename}"

    async def save(self, upload: UploadFile) -> StoredImage:
        content_type = (upload.content_type or "").lower()
        if content_type not in ALLOWED_IMAGE_TYPES:
            raise ValidationException("Only image files are allowed (jpeg, png, gif, webp)")

        os.makedirs(self.directory, exist_ok=True)
        filename = f"{uuid.uuid4().hex}{ALLOWED_IMAGE_TYPES[content_type]}"
        path = os.path.join(self.directory, filename)

        written = 0
        try:
            with open(path, "wb") as f:
                while chunk := await upload.read(CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_size_bytes:
                        raise ValidationException(
                            f"Image exceeds the maximum size of {self.max_size_bytes // (1024 * 1024)} MB"
                        )
                    f.write(chunk)
        except Exception:
            self._remove(path)
            raise

        if written == 0:
            self._remove(path)
            raise ValidationException("Uploaded image is empty")

        logger.info("Image stored", filename=filename, size=written)
        return StoredImage(filename=filename, path=path, url=self.url_for(filename))

    def delete(self, filename: Optional[str]) -> None:
        if not filename:
            return
        self._remove(os.path.join(self.directory, os.path.basename(filename)))

    @contextmanager
    def cleanup_on_error(self, image: Optional[StoredImage]) -> Iterator[None]:
        """Remove a freshly stored image if the block that references it fails."""
        try:
            yield
        except BaseException:
            if image is not None:
                self.delete(image.filename)
            raise

    def _remove(self, path: str) -> None:
        try:
            os.remove(path)
        except FileNotFoundError:
            return
        except OSError as e:
            logger.warning("Could not remove image", path=path, error=str(e))


def get_image_storage() -> ImageStorage:
    settings = get_settings()
    return ImageStorage(settings.UPLOAD_DIR, settings.MAX_IMAGE_SIZE_MB * 1024 * 1024)
