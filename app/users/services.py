# python imports
import logging
from typing import Any, Dict, Optional

# package imports
from sqlalchemy import func, or_, select
from sqlalchemy.exc import SQLAlchemyError

# project imports
from app.libs.session import session_scope
from app.libs.errors import NotFoundError, APIError
from app.comments.models import Comment, CommentLike
from app.products.models import Product, ProductStatus
from app.products.services import purge_products
from app.socials.models import Like, Favorite, Follow
from app.socials.services import FollowService
from app.media.services import schedule_image_deletion

# app imports
from .models import User, UserRole

logger = logging.getLogger(__name__)


class UserService:
    @staticmethod
    def get_profile(user_id: str, viewer_id: Optional[str] = None) -> Dict[str, Any]:
        with session_scope() as session:
            user = session.get(User, user_id)
            if not user:
                raise NotFoundError("User not found")

            profile = {
                "id": user.id,
                "username": user.username,
                "avatar": user.avatar,
                "bio": user.bio,
                "title": user.title,
                "contact": user.contact_lines,
                "created_at": user.created_at,
            }

        profile["stats"] = UserService.get_stats(user_id)
        profile["is_following"] = FollowService.is_following(viewer_id, user_id)
        return profile

    @staticmethod
    def get_stats(user_id: str) -> Dict[str, int]:
        """Follow counts and reaction totals over the user's published products"""
        follows = FollowService.count_follows(user_id)

        with session_scope() as session:
            likes, favorites, published = (
                session.query(
                    func.coalesce(func.sum(Product.likes), 0),
                    func.coalesce(func.sum(Product.favorites), 0),
                    func.count(Product.id),
                )
                .filter(
                    Product.user_id == user_id,
                    Product.status == ProductStatus.PUBLISHED,
                )
                .one()
            )

        return {
            "following_count": follows["following"],
            "followers_count": follows["followers"],
            "likes_count": int(likes),
            "favorites_count": int(favorites),
            "published_products_count": published,
            "total_likes_and_favorites": int(likes) + int(favorites),
        }

    @staticmethod
    def make_admin(email: str) -> User:
        try:
            with session_scope() as session:
                user = session.query(User).filter_by(email=email).first()
                if not user:
                    raise NotFoundError(f"No user with email {email}")
                user.role = UserRole.ADMIN
                logger.info(f"Promoted user {user.id} to admin")
                return user
        except SQLAlchemyError as e:
            logger.error(f"Error promoting user: {str(e)}")
            raise APIError("Failed to promote user", 500)

    @staticmethod
    def delete_user(user_id: str) -> Dict[str, int]:
        """
        Remove a user and everything they own in one transaction.

        Counters on other users' products and comments are decremented for
        every reaction the user leaves behind, so they keep matching the
        reaction rows. Images of the removed products are deleted in the
        background after commit.
        """
        try:
            with session_scope() as session:
                if session.get(User, user_id) is None:
                    raise NotFoundError("User not found")

                for reaction, counter in ((Like, Product.likes), (Favorite, Product.favorites)):
                    reacted = select(reaction.product_id).where(reaction.user_id == user_id)
                    session.query(Product).filter(Product.id.in_(reacted)).update(
                        {counter: counter - 1}, synchronize_session=False
                    )
                    session.query(reaction).filter(reaction.user_id == user_id).delete(
                        synchronize_session=False
                    )

                liked_comments = select(CommentLike.comment_id).where(
                    CommentLike.user_id == user_id
                )
                session.query(Comment).filter(Comment.id.in_(liked_comments)).update(
                    {Comment.likes: Comment.likes - 1}, synchronize_session=False
                )
                session.query(CommentLike).filter(CommentLike.user_id == user_id).delete(
                    synchronize_session=False
                )

                comments_removed = UserService._remove_comments(session, user_id)

                owned = session.query(Product).filter(Product.user_id == user_id).all()
                stored_urls = [url for product in owned for url in product.stored_image_urls()]
                purge_products(session, [product.id for product in owned])

                session.query(Follow).filter(
                    or_(Follow.follower_id == user_id, Follow.following_id == user_id)
                ).delete(synchronize_session=False)
                session.query(User).filter(User.id == user_id).delete(
                    synchronize_session=False
                )
        except SQLAlchemyError as e:
            logger.error(f"Error deleting user {user_id}: {str(e)}")
            raise APIError("Failed to delete user", 500)

        logger.info(
            f"Deleted user {user_id} with {len(owned)} products and {comments_removed} comments"
        )
        schedule_image_deletion(stored_urls)
        return {"products": len(owned), "comments": comments_removed}

    @staticmethod
    def _remove_comments(session, user_id: str) -> int:
        """Delete a user's comments, keeping other people's threads consistent"""
        authored = (
            session.query(Comment.id, Comment.parent_id, Comment.root_id)
            .filter(Comment.user_id == user_id)
            .order_by(Comment.id.desc())
            .all()
        )
        root_ids = [row.id for row in authored if row.root_id is None]

        # Newest first, so a reply's own parent is still the one it was created with
        for row in authored:
            if row.root_id is not None:
                session.query(Comment).filter(Comment.parent_id == row.id).update(
                    {Comment.parent_id: row.parent_id}, synchronize_session=False
                )

        conditions = [Comment.user_id == user_id]
        if root_ids:
            conditions.append(Comment.root_id.in_(root_ids))
        doomed = select(Comment.id).where(or_(*conditions))
        doomed_ids = [row[0] for row in session.execute(doomed)]
        if not doomed_ids:
            return 0

        session.query(CommentLike).filter(CommentLike.comment_id.in_(doomed_ids)).delete(
            synchronize_session=False
        )
        session.query(Comment).filter(Comment.id.in_(doomed_ids)).delete(
            synchronize_session=False
        )
        return len(doomed_ids)
