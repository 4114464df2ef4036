import logging
from collections import namedtuple
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Set

# package imports
from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import FlushError

# project imports
from app.libs.session import session_scope
from app.libs.errors import (
    NotFoundError,
    BadRequestError,
    ConflictError,
    APIError,
    ForbiddenError,
)

from app.users.models import User
from app.products.models import Product, ProductStatus
from app.comments.models import Comment, CommentLike

# app imports
from .models import Like, Favorite, Follow

logger = logging.getLogger(__name__)


class ReactionKind(Enum):
    LIKE = "like"
    FAVORITE = "favorite"
    COMMENT_LIKE = "comment_like"


ReactionTarget = namedtuple(
    "ReactionTarget",
    [
        "reaction",  # join-row model
        "model",  # reacted-to model
        "fk",  # join-row column pointing at the target
        "counter",  # denormalized counter on the target
        "label",
        "already_message",
        "missing_message",
        "self_message",
    ],
)

REACTION_TARGETS = {
    ReactionKind.LIKE: ReactionTarget(
        Like,
        Product,
        "product_id",
        "likes",
        "Product",
        "Product already liked",
        "Product not liked yet",
        "You cannot like your own product",
    ),
    ReactionKind.FAVORITE: ReactionTarget(
        Favorite,
        Product,
        "product_id",
        "favorites",
        "Product",
        "Product already favorited",
        "Product not favorited yet",
        "You cannot favorite your own product",
    ),
    ReactionKind.COMMENT_LIKE: ReactionTarget(
        CommentLike,
        Comment,
        "comment_id",
        "likes",
        "Comment",
        "Comment already liked",
        "Comment not liked yet",
        "You cannot like your own comment",
    ),
}


class ReactionService:
    """Likes, favorites and comment likes with their denormalized counters"""

    @staticmethod
    def _blocks_self_reaction(kind: ReactionKind) -> bool:
        if kind == ReactionKind.COMMENT_LIKE:
            return not current_app.config.get("ALLOW_SELF_COMMENT_LIKE", True)
        return True

    @staticmethod
    def _visible_owner(session, kind: ReactionKind, target_id: Any, viewer_id):
        """
        Owner of the reaction target, as seen by ``viewer_id``.

        Targets on a draft product exist only for the product's maker, so
        anyone else gets ``NotFound``.
        """
        target = REACTION_TARGETS[kind]
        query = session.query(
            target.model.user_id.label("owner_id"),
            Product.status.label("product_status"),
            Product.user_id.label("maker_id"),
        )
        if target.model is not Product:
            query = query.join(Product, Product.id == target.model.product_id)

        row = query.filter(target.model.id == target_id).first()
        if row is None or (
            row.product_status != ProductStatus.PUBLISHED
            and row.maker_id != viewer_id
        ):
            raise NotFoundError(f"{target.label} not found")
        return row.owner_id

    @staticmethod
    def toggle(
        kind: ReactionKind, user_id: str, target_id: Any, active: bool = True
    ) -> Dict[str, Any]:
        """
        Create (``active=True``) or remove (``active=False``) one reaction.

        The join row and the counter change in one transaction. Duplicate
        creation is caught by the composite primary key rather than by a
        prior read, so two concurrent requests from the same user cannot both
        increment the counter.
        """
        target = REACTION_TARGETS[kind]
        reaction_fk = getattr(target.reaction, target.fk)
        counter = getattr(target.model, target.counter)

        try:
            with session_scope() as session:
                owner_id = ReactionService._visible_owner(
                    session, kind, target_id, user_id
                )
                if ReactionService._blocks_self_reaction(kind) and owner_id == user_id:
                    raise ForbiddenError(target.self_message)

                if active:
                    session.add(target.reaction(user_id=user_id, **{target.fk: target_id}))
                    try:
                        session.flush()
                    except (IntegrityError, FlushError):
                        raise ConflictError(target.already_message)
                    delta = 1
                else:
                    removed = (
                        session.query(target.reaction)
                        .filter(
                            target.reaction.user_id == user_id,
                            reaction_fk == target_id,
                        )
                        .delete(synchronize_session=False)
                    )
                    if not removed:
                        raise ConflictError(target.missing_message)
                    delta = -1

                session.query(target.model).filter(target.model.id == target_id).update(
                    {counter: counter + delta}, synchronize_session=False
                )
                count = (
                    session.query(counter).filter(target.model.id == target_id).scalar()
                )

            logger.info(
                f"User {user_id} {'added' if active else 'removed'} {kind.value} on {target_id}"
            )
            return {"success": True, "count": count, "active": active}
        except SQLAlchemyError as e:
            logger.error(f"Error toggling {kind.value}: {str(e)}")
            raise APIError("Failed to update reaction", 500)

    @staticmethod
    def add(kind: ReactionKind, user_id: str, target_id: Any) -> Dict[str, Any]:
        return ReactionService.toggle(kind, user_id, target_id, active=True)

    @staticmethod
    def remove(kind: ReactionKind, user_id: str, target_id: Any) -> Dict[str, Any]:
        return ReactionService.toggle(kind, user_id, target_id, active=False)

    @staticmethod
    def status(
        kind: ReactionKind, user_id: Optional[str], target_id: Any
    ) -> Dict[str, Any]:
        """Counter of the target and whether ``user_id`` has reacted to it"""
        target = REACTION_TARGETS[kind]
        counter = getattr(target.model, target.counter)

        with session_scope() as session:
            ReactionService._visible_owner(session, kind, target_id, user_id)
            count = session.query(counter).filter(target.model.id == target_id).scalar()

            has_reacted = False
            if user_id:
                has_reacted = (
                    session.query(target.reaction)
                    .filter(
                        target.reaction.user_id == user_id,
                        getattr(target.reaction, target.fk) == target_id,
                    )
                    .first()
                    is not None
                )

            return {"count": count, "active": has_reacted}

    @staticmethod
    def reacted_ids(
        kind: ReactionKind, user_id: Optional[str], target_ids: Iterable[Any]
    ) -> Set[Any]:
        """Subset of ``target_ids`` the user has reacted to, in one query"""
        target_ids = list(target_ids)
        if not user_id or not target_ids:
            return set()

        target = REACTION_TARGETS[kind]
        reaction_fk = getattr(target.reaction, target.fk)

        with session_scope() as session:
            rows = (
                session.query(reaction_fk)
                .filter(
                    target.reaction.user_id == user_id,
                    reaction_fk.in_(target_ids),
                )
                .all()
            )
            return {row[0] for row in rows}


class FollowService:
    FOLLOW_DIRECTIONS = ("following", "followers")

    @staticmethod
    def follow(follower_id, following_id):
        if follower_id == following_id:
            raise BadRequestError("You cannot follow yourself")

        try:
            with session_scope() as session:
                if session.get(User, following_id) is None:
                    raise NotFoundError("User not found")

                session.add(Follow(follower_id=follower_id, following_id=following_id))
                try:
                    session.flush()
                except (IntegrityError, FlushError):
                    raise ConflictError("Already following this user")

            logger.info(f"User {follower_id} followed {following_id}")
            return {"success": True, "is_following": True}
        except SQLAlchemyError as e:
            logger.error(f"Error following user: {str(e)}")
            raise APIError("Failed to follow user", 500)

    @staticmethod
    def unfollow(follower_id, following_id):
        """Unfollow a user; unfollowing someone not followed is not an error"""
        try:
            with session_scope() as session:
                session.query(Follow).filter_by(
                    follower_id=follower_id, following_id=following_id
                ).delete(synchronize_session=False)

            return {"success": True, "is_following": False}
        except SQLAlchemyError as e:
            logger.error(f"Error unfollowing user: {str(e)}")
            raise APIError("Failed to unfollow user", 500)

    @staticmethod
    def is_following(viewer_id: Optional[str], target_id: str) -> bool:
        if not viewer_id or viewer_id == target_id:
            return False
        with session_scope() as session:
            return (
                session.query(Follow)
                .filter_by(follower_id=viewer_id, following_id=target_id)
                .first()
                is not None
            )

    @staticmethod
    def list_follows(user_id: str, direction: str) -> List[User]:
        """Users followed by ``user_id`` or following them, newest edge first"""
        if direction not in FollowService.FOLLOW_DIRECTIONS:
            raise BadRequestError("type must be 'following' or 'followers'")

        if direction == "following":
            own_column, other_column = Follow.follower_id, Follow.following_id
        else:
            own_column, other_column = Follow.following_id, Follow.follower_id

        with session_scope() as session:
            return (
                session.query(User)
                .join(Follow, other_column == User.id)
                .filter(own_column == user_id)
                .order_by(Follow.created_at.desc())
                .all()
            )

    @staticmethod
    def count_follows(user_id: str) -> Dict[str, int]:
        with session_scope() as session:
            following = session.query(Follow).filter_by(follower_id=user_id).count()
            followers = session.query(Follow).filter_by(following_id=user_id).count()
            return {"following": following, "followers": followers}
