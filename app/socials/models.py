from external.database import db
from app.libs.models import BaseReaction
from app.libs.datetime_utils import utcnow


class Like(BaseReaction):
    __tablename__ = "likes"

    product_id = db.Column(
        db.String(12),
        db.ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )

    product = db.relationship("Product")

    __table_args__ = (db.Index("idx_likes_product", "product_id"),)


class Favorite(BaseReaction):
    __tablename__ = "favorites"

    product_id = db.Column(
        db.String(12),
        db.ForeignKey("products.id", ondelete="CASCADE"),
        primary_key=True,
    )

    product = db.relationship("Product")

    __table_args__ = (db.Index("idx_favorites_product", "product_id"),)


class Follow(db.Model):
    __tablename__ = "follows"
    follower_id = db.Column(
        db.String(12), db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    following_id = db.Column(
        db.String(12), db.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True
    )
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    __table_args__ = (
        db.CheckConstraint("follower_id <> following_id", name="no_self_follow"),
        db.Index("idx_following_follower", "following_id", "follower_id"),
    )

    follower = db.relationship("User", foreign_keys=[follower_id])
    following = db.relationship("User", foreign_keys=[following_id])
