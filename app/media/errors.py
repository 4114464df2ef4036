from app.libs.errors import BadRequestError


class MediaUploadError(BadRequestError):
    """Upload rejected because the payload is not a usable image"""

    def __init__(self, message="Invalid image file"):
        super().__init__(message)
