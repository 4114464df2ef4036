import logging
from io import BytesIO
from typing import Iterable

from PIL import Image, UnidentifiedImageError
from botocore.exceptions import BotoCoreError, ClientError

from app.libs.aws.s3 import s3_service
from app.libs.errors import APIError
from .errors import MediaUploadError

logger = logging.getLogger(__name__)


class MediaService:
    """Image uploads for product galleries and avatars"""

    # upload type -> (bucket folder, longest edge in pixels)
    UPLOAD_TYPES = {
        "cover": ("products", 1920),
        "avatar": ("avatars", 512),
    }
    MAX_UPLOAD_BYTES = 10 * 1024 * 1024
    ALLOWED_FORMATS = {"JPEG", "PNG", "WEBP", "GIF"}

    @staticmethod
    def upload_image(file_stream: BytesIO, filename: str, upload_type: str = "cover"):
        """
        Validate, normalise and store an image.

        Returns:
            Public URL of the stored object
        """
        if upload_type not in MediaService.UPLOAD_TYPES:
            raise MediaUploadError("type must be 'avatar' or 'cover'")

        file_data = file_stream.read()
        if not file_data:
            raise MediaUploadError("Empty file provided")
        if len(file_data) > MediaService.MAX_UPLOAD_BYTES:
            raise MediaUploadError("File too large")

        MediaService._validate_image(BytesIO(file_data))

        folder, max_size = MediaService.UPLOAD_TYPES[upload_type]
        try:
            url = s3_service.upload_image(
                BytesIO(file_data), filename, folder=folder, max_size=max_size
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(f"Failed to store image {filename}: {e}")
            raise APIError("Failed to store image", 500)

        logger.info(f"Stored {upload_type} image {filename} at {url}")
        return url

    @staticmethod
    def _validate_image(stream: BytesIO):
        try:
            with Image.open(stream) as img:
                img.verify()
                image_format = img.format
        except (UnidentifiedImageError, OSError, SyntaxError) as e:
            logger.warning(f"Rejected upload that is not an image: {e}")
            raise MediaUploadError("File is not a valid image")

        if image_format not in MediaService.ALLOWED_FORMATS:
            raise MediaUploadError(f"Unsupported image format: {image_format}")


def schedule_image_deletion(urls: Iterable[str]) -> int:
    """
    Queue background deletion of stored images.

    Meant to be called after the owning transaction has committed. A failure
    to enqueue is logged and otherwise ignored.

    Returns:
        Number of deletions queued
    """
    from .tasks import delete_stored_image

    queued = 0
    for url in dict.fromkeys(url for url in urls if url):
        try:
            delete_stored_image.delay(url)
            queued += 1
        except Exception as e:
            logger.error(f"Failed to queue deletion of {url}: {e}")
    return queued
