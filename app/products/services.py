# python imports
import logging
from typing import Any, Dict, List, Optional

# package imports
from flask import current_app
from sqlalchemy import or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload, selectinload

# project imports
from app.libs.session import session_scope
from app.libs.pagination import CursorPaginator
from app.libs.datetime_utils import days_ago
from app.libs.errors import (
    NotFoundError,
    BadRequestError,
    ConflictError,
    APIError,
    ForbiddenError,
    AuthError,
)

from app.users.models import User
from app.categories.models import Category, CategoryType, ProductCategory
from app.comments.models import Comment, CommentLike
from app.socials.models import Like, Favorite
from app.socials.services import ReactionService, ReactionKind
from app.media.services import schedule_image_deletion

# app imports
from .models import Product, ProductStatus
from .constants import (
    FEED_TYPES,
    NEW_SLUG,
    UNFILTERED_SLUGS,
    SEARCH_WEIGHTS,
    MIN_PRODUCT_CATEGORIES,
    MAX_PRODUCT_CATEGORIES,
    EDITABLE_PRODUCT_FIELDS,
)

logger = logging.getLogger(__name__)


def purge_products(session, product_ids: List[str]) -> None:
    """
    Remove products together with every row that points at them.

    Runs inside the caller's transaction. Stored images are not touched.
    """
    if not product_ids:
        return

    product_comments = select(Comment.id).where(Comment.product_id.in_(product_ids))
    session.query(CommentLike).filter(
        CommentLike.comment_id.in_(product_comments)
    ).delete(synchronize_session=False)
    session.query(Comment).filter(Comment.product_id.in_(product_ids)).delete(
        synchronize_session=False
    )
    for reaction in (Like, Favorite):
        session.query(reaction).filter(reaction.product_id.in_(product_ids)).delete(
            synchronize_session=False
        )
    session.query(ProductCategory).filter(
        ProductCategory.product_id.in_(product_ids)
    ).delete(synchronize_session=False)
    session.query(Product).filter(Product.id.in_(product_ids)).delete(
        synchronize_session=False
    )


def annotate_reactions(items: List[Dict[str, Any]], viewer_id: Optional[str]) -> None:
    """Set has_liked / has_favorited on serialised products, two queries in total"""
    product_ids = [item["id"] for item in items]
    liked = ReactionService.reacted_ids(ReactionKind.LIKE, viewer_id, product_ids)
    favorited = ReactionService.reacted_ids(
        ReactionKind.FAVORITE, viewer_id, product_ids
    )
    for item in items:
        item["has_liked"] = item["id"] in liked
        item["has_favorited"] = item["id"] in favorited


class ProductService:
    @staticmethod
    def get_product(product_id: str, viewer_id: Optional[str] = None) -> Dict:
        """Single product; drafts are only visible to their owner"""
        with session_scope() as session:
            product = session.get(Product, product_id)
            if product is None or (
                not product.is_published and product.user_id != viewer_id
            ):
                raise NotFoundError("Product not found")
            item = ProductService.to_item(product, include_detail=True)

        annotate_reactions([item], viewer_id)
        return item

    @staticmethod
    def create_product(product_data: Dict[str, Any], user_id: str) -> Dict:
        category_ids = ProductService._validate_category_ids(
            product_data.get("category_ids")
        )

        try:
            with session_scope() as session:
                categories = ProductService._load_categories(session, category_ids)

                product = Product(
                    user_id=user_id,
                    status=product_data.get("status") or ProductStatus.DRAFT,
                    **{
                        k: v
                        for k, v in product_data.items()
                        if k in EDITABLE_PRODUCT_FIELDS and v is not None
                    },
                )
                product.set_images(product_data.get("images"))
                product.categories = categories
                session.add(product)
                session.flush()

                logger.info(f"User {user_id} created product {product.id}")
                item = ProductService.to_item(product, include_detail=True)
        except SQLAlchemyError as e:
            logger.error(f"Database error creating product: {str(e)}")
            raise APIError("Failed to create product", 500)

        annotate_reactions([item], user_id)
        return item

    @staticmethod
    def update_product(product_id: str, user_id: str, update_data: Dict[str, Any]):
        """
        Update an owned product.

        When a new image list is supplied, URLs that disappear from it are
        deleted from object storage in the background once the change is
        committed.
        """
        removed_urls = []
        try:
            with session_scope() as session:
                product = session.get(Product, product_id)
                if not product:
                    raise NotFoundError("Product not found")
                if product.user_id != user_id:
                    raise ForbiddenError("You can only update your own products")

                new_name = update_data.get("name")
                if new_name and new_name != product.name:
                    duplicate = (
                        session.query(Product.id)
                        .filter(
                            Product.user_id == user_id,
                            Product.name == new_name,
                            Product.id != product_id,
                        )
                        .first()
                    )
                    if duplicate:
                        raise ConflictError("You already have a product with this name")

                for field in EDITABLE_PRODUCT_FIELDS:
                    if field in update_data:
                        setattr(product, field, update_data[field])

                if update_data.get("status"):
                    product.status = update_data["status"]

                if "category_ids" in update_data:
                    category_ids = ProductService._validate_category_ids(
                        update_data["category_ids"]
                    )
                    product.categories = ProductService._load_categories(
                        session, category_ids
                    )

                if "images" in update_data:
                    previous_urls = product.stored_image_urls()
                    product.set_images(update_data["images"])
                    kept = set(product.stored_image_urls())
                    removed_urls = [url for url in previous_urls if url not in kept]

                session.flush()
                item = ProductService.to_item(product, include_detail=True)
        except SQLAlchemyError as e:
            logger.error(f"Database error updating product {product_id}: {str(e)}")
            raise APIError("Failed to update product", 500)

        if removed_urls:
            logger.info(
                f"Product {product_id} dropped {len(removed_urls)} images, scheduling cleanup"
            )
            schedule_image_deletion(removed_urls)

        annotate_reactions([item], user_id)
        return item

    @staticmethod
    def delete_product(product_id: str, user_id: str) -> bool:
        try:
            with session_scope() as session:
                product = session.get(Product, product_id)
                if not product:
                    raise NotFoundError("Product not found")
                if product.user_id != user_id:
                    raise ForbiddenError("You can only delete your own products")

                stored_urls = product.stored_image_urls()
                purge_products(session, [product_id])
        except SQLAlchemyError as e:
            logger.error(f"Database error deleting product {product_id}: {str(e)}")
            raise APIError("Failed to delete product", 500)

        logger.info(f"User {user_id} deleted product {product_id}")
        schedule_image_deletion(stored_urls)
        return True

    @staticmethod
    def _validate_category_ids(category_ids) -> List[int]:
        category_ids = list(dict.fromkeys(category_ids or []))
        if not MIN_PRODUCT_CATEGORIES <= len(category_ids) <= MAX_PRODUCT_CATEGORIES:
            raise BadRequestError(
                f"Select between {MIN_PRODUCT_CATEGORIES} and {MAX_PRODUCT_CATEGORIES} categories"
            )
        return category_ids

    @staticmethod
    def _load_categories(session, category_ids: List[int]) -> List[Category]:
        categories = (
            session.query(Category)
            .filter(
                Category.id.in_(category_ids), Category.type == CategoryType.NORMAL
            )
            .all()
        )
        if len(categories) != len(category_ids):
            raise BadRequestError("Unknown category")
        return categories

    @staticmethod
    def to_item(product: Product, include_detail: bool = False) -> Dict[str, Any]:
        item = {
            "id": product.id,
            "name": product.name,
            "description": product.description,
            "image_url": product.image_url,
            "images": product.image_list,
            "website_url": product.website_url,
            "github_url": product.github_url,
            "status": product.status,
            "likes": product.likes or 0,
            "favorites": product.favorites or 0,
            "created_at": product.created_at,
            "updated_at": product.updated_at,
            "categories": [
                {
                    "id": category.id,
                    "name": category.name,
                    "slug": category.slug,
                    "icon": category.icon,
                    "type": category.type.value,
                }
                for category in product.categories
            ],
            "user": {
                "id": product.user.id,
                "username": product.user.username,
                "avatar": product.user.avatar,
                "title": product.user.title,
            },
            "has_liked": False,
            "has_favorited": False,
        }
        if include_detail:
            item["detail"] = product.detail
        return item


class FeedService:
    """Category feeds, per-user relationship feeds and search"""

    DEFAULT_ORDER = [(Product.likes, "desc"), (Product.id, "desc")]
    NEWEST_ORDER = [(Product.created_at, "desc"), (Product.id, "desc")]

    @staticmethod
    def get_feed(args: Dict[str, Any], viewer_id: Optional[str] = None) -> Dict:
        """
        Resolve a feed request.

        Without a search term the result is one keyset page and
        ``next_cursor`` points at the first row of the following page. With a
        search term the whole ranked candidate set is returned at once and
        ``next_cursor`` is None.
        """
        search = (args.get("search") or "").strip()
        cursor = args.get("cursor")
        if search and cursor:
            raise BadRequestError("cursor cannot be combined with search")

        config = current_app.config
        limit = args.get("limit") or config.get("FEED_DEFAULT_LIMIT", 10)

        with session_scope() as session:
            query, order_by = FeedService._build_query(session, args, viewer_id)

            if search:
                products = FeedService._rank(query, order_by, search)
                next_cursor = None
            else:
                page = CursorPaginator(
                    query,
                    Product,
                    order_by,
                    limit=limit,
                    max_limit=config.get("FEED_MAX_LIMIT", 50),
                ).paginate(cursor)
                products, next_cursor = page["items"], page["next_cursor"]

            items = [ProductService.to_item(product) for product in products]

        annotate_reactions(items, viewer_id)
        return {"items": items, "next_cursor": next_cursor}

    @staticmethod
    def _build_query(session, args, viewer_id):
        query = session.query(Product).options(
            joinedload(Product.user), selectinload(Product.categories)
        )

        feed_type = args.get("type")
        if feed_type:
            subject_id = args.get("user_id") or viewer_id
            if not subject_id:
                raise AuthError("Sign in to view this feed")
            return FeedService._relationship_query(
                query, feed_type, subject_id, viewer_id, args.get("status")
            )

        query = query.filter(Product.status == ProductStatus.PUBLISHED)

        category = args.get("category")
        if category == NEW_SLUG:
            window = current_app.config.get("FEED_NEW_WINDOW_DAYS", 15)
            return (
                query.filter(Product.created_at >= days_ago(window)),
                FeedService.NEWEST_ORDER,
            )
        if category and category not in UNFILTERED_SLUGS:
            query = query.filter(Product.categories.any(Category.slug == category))
        return query, FeedService.DEFAULT_ORDER

    @staticmethod
    def _relationship_query(query, feed_type, subject_id, viewer_id, status):
        if feed_type == FEED_TYPES["CREATED"]:
            query = query.filter(Product.user_id == subject_id)
            if viewer_id == subject_id:
                # Owners see their drafts unless they narrow by status
                if status:
                    query = query.filter(Product.status == status)
            else:
                query = query.filter(Product.status == ProductStatus.PUBLISHED)
            return query, FeedService.NEWEST_ORDER

        reaction = {FEED_TYPES["LIKED"]: Like, FEED_TYPES["FAVORITED"]: Favorite}.get(
            feed_type
        )
        if reaction is None:
            raise BadRequestError(f"Unknown feed type: {feed_type}")

        query = query.join(reaction, reaction.product_id == Product.id).filter(
            reaction.user_id == subject_id,
            Product.status == ProductStatus.PUBLISHED,
        )
        return query, FeedService.DEFAULT_ORDER

    @staticmethod
    def _rank(query, order_by, search: str) -> List[Product]:
        """Candidates matching ``search`` anywhere, best score first"""
        pattern = FeedService._like_pattern(search)
        candidates = (
            query.filter(
                or_(
                    Product.name.ilike(pattern, escape="\\"),
                    Product.description.ilike(pattern, escape="\\"),
                    Product.user.has(User.username.ilike(pattern, escape="\\")),
                    Product.categories.any(Category.name.ilike(pattern, escape="\\")),
                )
            )
            .order_by(
                *[
                    column.desc() if direction == "desc" else column.asc()
                    for column, direction in order_by
                ]
            )
            .all()
        )

        term = search.casefold()
        # sorted() is stable, equal scores keep the base order
        return sorted(
            candidates, key=lambda product: -FeedService.score(product, term)
        )

    @staticmethod
    def score(product: Product, term: str) -> int:
        term = term.casefold()
        score = 0
        if term in (product.name or "").casefold():
            score += SEARCH_WEIGHTS["name"]
        if term in (product.description or "").casefold():
            score += SEARCH_WEIGHTS["description"]
        if any(term in (category.name or "").casefold() for category in product.categories):
            score += SEARCH_WEIGHTS["category"]
        if product.user and term in (product.user.username or "").casefold():
            score += SEARCH_WEIGHTS["username"]
        return score

    @staticmethod
    def _like_pattern(search: str) -> str:
        escaped = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        return f"%{escaped}%"
