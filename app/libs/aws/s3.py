import logging
import boto3
import os
import uuid
from typing import Optional
from urllib.parse import urlparse, unquote
from botocore.exceptions import NoCredentialsError, PartialCredentialsError, ClientError
from io import BytesIO
from PIL import Image

from main.config import settings
from app.libs.datetime_utils import utcnow

logger = logging.getLogger(__name__)


class S3Service:
    """S3 service for storing product and avatar images"""

    def __init__(self):
        """Initialize S3 client with credentials from settings"""
        try:
            self.s3 = boto3.client(
                "s3",
                aws_access_key_id=settings.AWS_ACCESS_KEY or None,
                aws_secret_access_key=settings.AWS_SECRET_KEY or None,
                region_name=settings.AWS_REGION,
            )
            self.bucket = settings.AWS_S3_BUCKET
            self.cdn_domain = settings.CDN_DOMAIN or None
            self.default_acl = "public-read"

        except (NoCredentialsError, PartialCredentialsError) as e:
            logger.error(f"AWS credentials not found: {e}")
            raise

    def upload_fileobj(
        self,
        file_obj: BytesIO,
        s3_key: str,
        content_type: Optional[str] = None,
        acl: str = None,
    ) -> str:
        """
        Upload a file object to the bucket

        Args:
            file_obj: File-like object (BytesIO, file handle, etc.)
            s3_key: S3 object key
            content_type: MIME type of the file
            acl: Access control list (default: public-read)

        Returns:
            Public URL of the uploaded file
        """
        extra_args = {"ACL": acl or self.default_acl}
        if content_type:
            extra_args["ContentType"] = content_type

        try:
            self.s3.upload_fileobj(file_obj, self.bucket, s3_key, ExtraArgs=extra_args)
        except ClientError as e:
            logger.error(f"Failed to upload file object to {s3_key}: {e}")
            raise

        url = self._generate_url(s3_key)
        logger.info(f"Successfully uploaded file object to {url}")
        return url

    def upload_image(
        self,
        image_data: BytesIO,
        filename: str,
        folder: str = "products",
        max_size: int = 1920,
    ) -> str:
        """Normalise an image and upload it, returning its public URL"""
        optimized = self.optimize_image(image_data, max_size, max_size)
        s3_key = self.generate_s3_key(folder, filename, extension=".jpg")
        return self.upload_fileobj(optimized, s3_key, content_type="image/jpeg")

    def delete_file(self, s3_key: str) -> bool:
        """
        Delete a file from the bucket

        Returns:
            True if successful, False otherwise
        """
        try:
            self.s3.delete_object(Bucket=self.bucket, Key=s3_key)
            logger.info(f"Successfully deleted {s3_key} from {self.bucket}")
            return True
        except ClientError as e:
            logger.error(f"Failed to delete {s3_key}: {e}")
            return False

    def delete_by_url(self, url: str) -> bool:
        """Delete the object a public URL points at; URLs without a path are ignored"""
        s3_key = self.key_from_url(url)
        if not s3_key:
            logger.warning(f"Cannot derive storage key from {url!r}")
            return False
        return self.delete_file(s3_key)

    @staticmethod
    def key_from_url(url: str) -> Optional[str]:
        if not url:
            return None
        path = unquote(urlparse(url).path).lstrip("/")
        return path or None

    def _generate_url(self, s3_key: str) -> str:
        if self.cdn_domain:
            return f"https://{self.cdn_domain}/{s3_key}"
        return f"https://{self.bucket}.s3.amazonaws.com/{s3_key}"

    def generate_s3_key(
        self, folder: str, filename: str, extension: Optional[str] = None
    ) -> str:
        """
        Build a collision-free key such as ``products/20240101/<hex>.jpg``
        """
        _, ext = os.path.splitext(filename)
        ext = (extension or ext or "").lower()
        day = utcnow().strftime("%Y%m%d")
        return f"{folder}/{day}/{uuid.uuid4().hex}{ext}"

    def optimize_image(
        self,
        image_data: BytesIO,
        max_width: int,
        max_height: int,
        quality: int = 85,
        format: str = "JPEG",
    ) -> BytesIO:
        """
        Optimize image for web delivery

        Args:
            image_data: Image data as BytesIO
            max_width: Maximum width
            max_height: Maximum height
            quality: JPEG quality (1-100)
            format: Output format (JPEG, PNG, WEBP)

        Returns:
            Optimized image as BytesIO
        """
        with Image.open(image_data) as img:
            # Flatten transparency onto white
            if img.mode in ("RGBA", "LA", "P"):
                background = Image.new("RGB", img.size, (255, 255, 255))
                if img.mode == "P":
                    img = img.convert("RGBA")
                background.paste(
                    img, mask=img.split()[-1] if img.mode in ("RGBA", "LA") else None
                )
                img = background
            elif img.mode != "RGB":
                img = img.convert("RGB")

            if img.width > max_width or img.height > max_height:
                img.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)

            output = BytesIO()
            img.save(output, format=format, quality=quality, optimize=True)
            output.seek(0)
            return output


# Global S3 service instance
s3_service = S3Service()
