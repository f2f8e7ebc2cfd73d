"""
Bus Pass Backend - Photo Storage
==================================

What:  Stores rider photos and hands back an opaque filename reference.
How:   PhotoStorage is the capability the pass creator depends on:
           store(content, filename) → reference
           retrieve(reference)      → bytes
       LocalPhotoStorage implements it on the local file system under
       settings.storage_root. An object-store backend only has to implement
       the same abstract methods.
Who:   Called by BusPassService on submission and by the uploads router,
       which serves stored photos back under /uploads/<reference>.

Upload checks (in order):
    1. Extension in ALLOWED_EXTENSIONS
    2. Non-empty and within settings.max_file_size
    3. Content sniffed by libmagic is one of ALLOWED_MIME_TYPES
    4. Write to a generated filename (timestamp + random suffix + extension)

References are flat filenames. Anything that contains a path separator or
resolves outside the storage root is rejected, so a reference taken from a
URL can never escape the storage directory.
"""

import abc
import logging
import os
import time
import uuid
from pathlib import Path
from typing import Optional

import aiofiles
import magic

from buspass.config import settings
from buspass.exceptions import FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}
ALLOWED_MIME_TYPES = {"image/png", "image/jpeg", "image/gif", "image/webp"}


def sniff_media_type(content: bytes) -> str:
    """Media type of content from its leading bytes (libmagic)."""
    try:
        return magic.from_buffer(content, mime=True)
    except magic.MagicException as e:
        logger.error("Media type detection failed: %s", str(e))
        raise FileStorageError(
            message="Could not verify photo type",
            error=str(e),
        )


class PhotoStorage(abc.ABC):
    """Capability interface for persisting uploaded photos."""

    @abc.abstractmethod
    async def store(self, content: bytes, filename: str) -> str:
        """Persist the photo and return its reference."""

    @abc.abstractmethod
    async def retrieve(self, reference: str) -> bytes:
        """Return the bytes stored under reference (NotFoundError if missing)."""

    @abc.abstractmethod
    async def delete(self, reference: str) -> None:
        """Remove a stored photo. Missing references are ignored."""


class LocalPhotoStorage(PhotoStorage):
    """
    Photo storage on the local file system.

    Directory Structure:
        uploads/
        ├── 1718000000000-3f2a9c1e.jpg
        └── 1718000004512-b81d0e77.png

    The generated name starts with the upload time in milliseconds, so
    directory listings sort chronologically.
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                          If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("LocalPhotoStorage initialized with storage_root=%s", self.storage_root)

    # ── Validation ────────────────────────────────────────────────────────

    def validate_extension(self, filename: str) -> str:
        """
        Returns: Normalized extension (lowercase with dot).
        Raises:  ValidationError if extension is not allowed.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="photo",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, size: int) -> None:
        """Reject empty uploads and uploads above settings.max_file_size."""
        if size == 0:
            raise ValidationError(
                message="Uploaded photo is empty.",
                field="photo",
            )

        if size > settings.max_file_size:
            max_mb = settings.max_file_size / (1024 * 1024)
            raise ValidationError(
                message=(
                    f"Photo is too large ({size / (1024 * 1024):.1f}MB). "
                    f"Maximum allowed size is {max_mb:.0f}MB."
                ),
                field="photo",
                context={"max_size_mb": max_mb, "actual_size": size},
            )

    def validate_content(self, content: bytes) -> str:
        """
        Check the photo bytes are really an image of an allowed type.

        A renamed document (resume.pdf saved as photo.jpg) passes the
        extension check but not this one.

        Returns: The sniffed media type.
        Raises:  ValidationError if the content is not an allowed image.
        """
        media_type = sniff_media_type(content)
        if media_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                message=f"Photo content '{media_type}' is not a supported image.",
                field="photo",
                context={"detected_mime": media_type, "allowed": sorted(ALLOWED_MIME_TYPES)},
            )
        return media_type

    # ── Paths ─────────────────────────────────────────────────────────────

    def _generate_reference(self, extension: str) -> str:
        millis = int(time.time() * 1000)
        return f"{millis}-{uuid.uuid4().hex[:8]}{extension}"

    def resolve(self, reference: str) -> Path:
        """
        Map a reference to its absolute path inside the storage root.

        Raises:
            NotFoundError: the reference is not a plain filename inside the root
        """
        if not reference or "/" in reference or "\\" in reference or reference in {".", ".."}:
            raise NotFoundError(resource="photo", resource_id=reference)

        path = (self.storage_root / reference).resolve()
        if path.parent != self.storage_root:
            raise NotFoundError(resource="photo", resource_id=reference)
        return path

    # ── Capability ────────────────────────────────────────────────────────

    async def store(self, content: bytes, filename: str) -> str:
        """
        Validate and write an uploaded photo.

        Returns:
            The generated filename, recorded on the pass as its photo reference.

        Raises:
            ValidationError: bad extension, empty, oversized or non-image upload (→ 400)
            FileStorageError: the write failed (→ 500)
        """
        ext = self.validate_extension(filename)
        self.validate_size(len(content))
        self.validate_content(content)

        reference = self._generate_reference(ext)
        path = self.storage_root / reference

        try:
            async with aiofiles.open(path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store photo at %s: %s", path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded photo",
                error=str(e),
                context={"path": str(path)},
            )

        logger.info("Photo stored: %s (%d bytes)", reference, len(content))
        return reference

    async def retrieve(self, reference: str) -> bytes:
        path = self.resolve(reference)
        if not path.is_file():
            raise NotFoundError(resource="photo", resource_id=reference)

        try:
            async with aiofiles.open(path, "rb") as f:
                return await f.read()
        except OSError as e:
            raise FileStorageError(
                message="Failed to read stored photo",
                error=str(e),
                context={"reference": reference},
            )

    async def delete(self, reference: str) -> None:
        """
        Remove a stored photo (cleanup after a failed pass insert).

        Best-effort: a missing file or an OS error is logged, not raised,
        so the original failure is what reaches the client.
        """
        try:
            path = self.resolve(reference)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up photo: %s", reference)
            else:
                logger.debug("Cleanup: photo already gone: %s", reference)
        except (OSError, NotFoundError) as e:
            logger.warning("Failed to clean up photo %s: %s", reference, str(e))


# ── Singleton Instance ────────────────────────────────────────────────────
photo_storage: PhotoStorage = LocalPhotoStorage()
