import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

# package imports
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import joinedload

# project imports
from app.libs.session import session_scope
from app.libs.errors import (
    NotFoundError,
    BadRequestError,
    ForbiddenError,
    APIError,
)
from app.products.models import Product
from app.socials.services import ReactionService, ReactionKind

# app imports
from .models import Comment, CommentLike

logger = logging.getLogger(__name__)


class CommentService:
    @staticmethod
    def list_thread(product_id: str, viewer_id: Optional[str] = None) -> List[Dict]:
        """
        Two-tier comment view of a product.

        Roots come newest first. Each root carries every comment sharing its
        ``root_id`` as ``replies``, oldest first. Three queries are issued:
        roots, descendants and the viewer's comment likes.
        """
        with session_scope() as session:
            CommentService._visible_product(session, product_id, viewer_id)

            roots = (
                session.query(Comment)
                .options(joinedload(Comment.user))
                .filter(Comment.product_id == product_id, Comment.root_id.is_(None))
                .order_by(Comment.created_at.desc(), Comment.id.desc())
                .all()
            )
            if not roots:
                return []

            root_ids = [root.id for root in roots]
            descendants = (
                session.query(Comment)
                .options(
                    joinedload(Comment.user),
                    joinedload(Comment.parent).joinedload(Comment.user),
                )
                .filter(Comment.root_id.in_(root_ids))
                .order_by(Comment.created_at.asc(), Comment.id.asc())
                .all()
            )

            replies_by_root = defaultdict(list)
            for reply in descendants:
                replies_by_root[reply.root_id].append(
                    CommentService._to_item(reply, viewer_id)
                )

            thread = []
            for root in roots:
                item = CommentService._to_item(root, viewer_id)
                item["replies"] = replies_by_root.get(root.id, [])
                thread.append(item)

        items = thread + [reply for item in thread for reply in item["replies"]]
        liked = ReactionService.reacted_ids(
            ReactionKind.COMMENT_LIKE, viewer_id, [item["id"] for item in items]
        )
        for item in items:
            item["has_liked"] = item["id"] in liked
        return thread

    @staticmethod
    def post_comment(
        product_id: str, user_id: str, content: str, parent_id: Optional[int] = None
    ) -> Dict[str, Any]:
        content = (content or "").strip()
        if not content:
            raise BadRequestError("Comment content cannot be empty")

        max_length = current_app.config.get("COMMENT_MAX_LENGTH", 2000)
        if len(content) > max_length:
            raise BadRequestError(f"Comment cannot exceed {max_length} characters")

        try:
            with session_scope() as session:
                CommentService._visible_product(session, product_id, user_id)

                root_id = None
                if parent_id is not None:
                    parent = session.get(Comment, parent_id)
                    if parent is None:
                        raise NotFoundError("Parent comment not found")
                    if parent.product_id != product_id:
                        raise BadRequestError(
                            "Parent comment belongs to another product"
                        )
                    # Replies to replies still group under the top-level comment
                    root_id = parent.root_id or parent.id

                comment = Comment(
                    content=content,
                    user_id=user_id,
                    product_id=product_id,
                    parent_id=parent_id,
                    root_id=root_id,
                )
                session.add(comment)
                session.flush()

                logger.info(
                    f"User {user_id} commented {comment.id} on product {product_id}"
                )
                return CommentService._to_item(comment, user_id)
        except SQLAlchemyError as e:
            logger.error(f"Error posting comment: {str(e)}")
            raise APIError("Failed to post comment", 500)

    @staticmethod
    def delete_comment(comment_id: int, user_id: str) -> int:
        """
        Delete a comment written by ``user_id``.

        A top-level comment takes its whole thread with it. A reply is removed
        alone and the replies that answered it move up to its parent.

        Returns:
            Number of comment rows removed
        """
        try:
            with session_scope() as session:
                comment = session.get(Comment, comment_id)
                if comment is None:
                    raise NotFoundError("Comment not found")
                if comment.user_id != user_id:
                    raise ForbiddenError("You can only delete your own comments")

                if comment.root_id is None:
                    doomed = [comment.id] + [
                        row.id
                        for row in session.query(Comment.id).filter(
                            Comment.root_id == comment.id
                        )
                    ]
                else:
                    doomed = [comment.id]
                    session.query(Comment).filter(
                        Comment.parent_id == comment.id
                    ).update(
                        {Comment.parent_id: comment.parent_id},
                        synchronize_session=False,
                    )

                session.query(CommentLike).filter(
                    CommentLike.comment_id.in_(doomed)
                ).delete(synchronize_session=False)
                session.query(Comment).filter(
                    Comment.id.in_(doomed), Comment.id != comment.id
                ).delete(synchronize_session=False)
                session.delete(comment)

            logger.info(f"User {user_id} deleted comment {comment_id} ({len(doomed)} rows)")
            return len(doomed)
        except SQLAlchemyError as e:
            logger.error(f"Error deleting comment: {str(e)}")
            raise APIError("Failed to delete comment", 500)

    @staticmethod
    def _visible_product(session, product_id: str, viewer_id: Optional[str]) -> Product:
        # Drafts have no public thread
        product = session.get(Product, product_id)
        if product is None or (
            not product.is_published and product.user_id != viewer_id
        ):
            raise NotFoundError("Product not found")
        return product

    @staticmethod
    def _author(comment: Comment) -> Dict[str, Any]:
        if comment.user is not None:
            return {
                "id": comment.user.id,
                "username": comment.user.username,
                "avatar": comment.user.avatar,
            }
        return {"id": None, "username": comment.guest_name, "avatar": comment.guest_avatar}

    @staticmethod
    def _reply_to_user(comment: Comment, viewer_id: Optional[str]):
        """Whom a reply addresses, or None when it should not be shown"""
        parent = comment.parent
        if parent is None:
            return None

        config = current_app.config
        if config.get("COMMENT_HIDE_REPLY_TO_ROOT") and parent.id == comment.root_id:
            return None

        author = CommentService._author(parent)
        if (
            config.get("COMMENT_HIDE_REPLY_TO_VIEWER", True)
            and viewer_id
            and author["id"] == viewer_id
        ):
            return None
        if not author["username"]:
            return None
        return {"id": author["id"], "username": author["username"]}

    @staticmethod
    def _to_item(comment: Comment, viewer_id: Optional[str]) -> Dict:
        return {
            "id": comment.id,
            "content": comment.content,
            "product_id": comment.product_id,
            "parent_id": comment.parent_id,
            "root_id": comment.root_id,
            "created_at": comment.created_at,
            "likes": comment.likes or 0,
            "has_liked": False,
            "user": CommentService._author(comment),
            "reply_to_user": CommentService._reply_to_user(comment, viewer_id),
        }
