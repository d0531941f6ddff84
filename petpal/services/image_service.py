"""Image service for validating and reading animal picture uploads."""

import inspect
import io
from typing import Any, Optional

from fastapi import UploadFile
from PIL import Image

from petpal.config import Settings


class ImageValidationError(ValueError):
    """Raised when an upload is not an acceptable image."""


async def drain_image(image: Any) -> Optional[bytes]:
    """
    Read an image source completely into memory.

    Accepts raw bytes, an object with an async ``read()`` (``UploadFile``)
    or a binary file-like object. Returns None for no image or an empty one.
    """
    if image is None:
        return None

    if isinstance(image, (bytes, bytearray, memoryview)):
        data = bytes(image)
    else:
        data = image.read()
        if inspect.isawaitable(data):
            data = await data

    return data or None


class ImageService:
    """Service for validating uploaded animal pictures."""

    def __init__(self, settings: Settings):
        """
        Initialize ImageService with configuration.

        Args:
            settings: Application settings containing upload limits
        """
        self.allowed_types = settings.get_allowed_image_types_list()
        self.max_size = settings.max_image_size_bytes

    async def read_upload(self, file: Optional[UploadFile]) -> Optional[bytes]:
        """
        Validate an uploaded picture and return its bytes.

        An absent upload, or a browser's empty file field, yields None.

        Raises:
            ImageValidationError: wrong content type, too large, or not an image
        """
        if file is None or not file.filename:
            return None

        contents = await drain_image(file)
        if contents is None:
            return None

        if file.content_type not in self.allowed_types:
            raise ImageValidationError(
                f"Invalid file type. Allowed types: {', '.join(self.allowed_types)}"
            )

        self.validate_bytes(contents)
        return contents

    def validate_bytes(self, contents: bytes) -> None:
        """
        Check size and that Pillow can identify the data as an image.

        Raises:
            ImageValidationError: If the data is too large or not an image
        """
        if len(contents) > self.max_size:
            size_mb = len(contents) / (1024 * 1024)
            max_mb = self.max_size / (1024 * 1024)
            raise ImageValidationError(
                f"File size ({size_mb:.2f}MB) exceeds maximum allowed size ({max_mb}MB)"
            )

        try:
            with Image.open(io.BytesIO(contents)) as image:
                image.verify()
        except Exception as e:
            raise ImageValidationError(f"File is not a valid image: {str(e)}")
