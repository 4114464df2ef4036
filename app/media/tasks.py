# python imports
import logging

# package imports
from botocore.exceptions import BotoCoreError, ClientError
from celery import shared_task

# project imports
from app.libs.aws.s3 import s3_service

logger = logging.getLogger(__name__)


@shared_task(ignore_result=True)
def delete_stored_image(url: str) -> bool:
    """
    Remove one stored image from object storage.

    Failures leave an orphaned object behind and are only logged; nothing is
    retried and nothing is reported back to the request that scheduled it.
    """
    try:
        deleted = s3_service.delete_by_url(url)
    except (BotoCoreError, ClientError) as e:
        logger.error(f"Failed to delete stored image {url}: {e}")
        return False

    if deleted:
        logger.info(f"Deleted stored image {url}")
    return deleted
