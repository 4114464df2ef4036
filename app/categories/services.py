# python imports
import json
import logging

# package imports
from flask import current_app
from redis.exceptions import RedisError

# project imports
from external.redis import redis_client
from app.libs.session import session_scope

# app imports
from .models import Category

logger = logging.getLogger(__name__)

CATEGORY_CACHE_KEY = "categories:all"


class CategoryService:
    @staticmethod
    def list_categories():
        """All categories in display order, served from Redis when cached"""
        try:
            cached = redis_client.get(CATEGORY_CACHE_KEY)
            if cached:
                return json.loads(cached)
        except (RedisError, ValueError) as e:
            logger.warning(f"Category cache read failed: {str(e)}")

        with session_scope() as session:
            categories = (
                session.query(Category).order_by(Category.order, Category.name).all()
            )
            data = [CategoryService.to_item(category) for category in categories]

        try:
            redis_client.set(
                CATEGORY_CACHE_KEY,
                json.dumps(data),
                ex=current_app.config.get("CATEGORY_CACHE_TTL", 600),
            )
        except RedisError as e:
            logger.warning(f"Category cache write failed: {str(e)}")

        return data

    @staticmethod
    def to_item(category):
        return {
            "id": category.id,
            "name": category.name,
            "slug": category.slug,
            "icon": category.icon,
            "type": category.type.value,
            "order": category.order,
        }

    @staticmethod
    def invalidate_cache():
        try:
            redis_client.delete(CATEGORY_CACHE_KEY)
        except RedisError as e:
            logger.warning(f"Category cache invalidation failed: {str(e)}")
