from external.database import db
from app.libs.models import BaseModel, BaseReaction


class Comment(BaseModel):
    """
    Product comment, flattened to two tiers.

    ``parent_id`` is the comment being answered and is only used to show whom
    a reply addresses. ``root_id`` is the top-level ancestor and is what
    threads are grouped by. Both are null for a top-level comment and both are
    set for any reply, however deep the conversation goes.
    """

    __tablename__ = "comments"

    id = db.Column(db.Integer, primary_key=True)
    content = db.Column(db.Text, nullable=False)
    user_id = db.Column(
        db.String(12), db.ForeignKey("users.id", ondelete="CASCADE"), nullable=True
    )
    product_id = db.Column(
        db.String(12), db.ForeignKey("products.id", ondelete="CASCADE"), nullable=False
    )
    parent_id = db.Column(
        db.Integer, db.ForeignKey("comments.id", ondelete="SET NULL"), nullable=True
    )
    root_id = db.Column(
        db.Integer, db.ForeignKey("comments.id", ondelete="CASCADE"), nullable=True
    )

    # Legacy guest authorship, only read for rows without a user
    guest_name = db.Column(db.String(50))
    guest_avatar = db.Column(db.String(500))

    likes = db.Column(db.Integer, default=0, nullable=False)

    user = db.relationship("User", back_populates="comments")
    product = db.relationship("Product")
    parent = db.relationship("Comment", remote_side=[id], foreign_keys=[parent_id])

    __table_args__ = (
        db.Index("idx_comments_product_root", "product_id", "root_id", "created_at"),
        db.Index("idx_comments_root", "root_id"),
    )


class CommentLike(BaseReaction):
    __tablename__ = "comment_likes"

    comment_id = db.Column(
        db.Integer,
        db.ForeignKey("comments.id", ondelete="CASCADE"),
        primary_key=True,
    )

    comment = db.relationship("Comment")

    __table_args__ = (db.Index("idx_comment_likes_comment", "comment_id"),)
