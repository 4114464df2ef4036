import redis
from main.config import settings
import logging

logger = logging.getLogger(__name__)


class RedisClient:
    def __init__(self):
        self.client = redis.Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            decode_responses=True,
            socket_connect_timeout=1,
        )
        logger.info("Redis client initialized")

    # String operations
    def get(self, name):
        """Wrapper for Redis get command"""
        return self.client.get(name)

    def set(self, name, value, ex=None):
        """Wrapper for Redis set command"""
        return self.client.set(name, value, ex=ex)

    def delete(self, *names):
        """Wrapper for Redis delete command"""
        return self.client.delete(*names)


redis_client = RedisClient()
