# package imports
import logging
from flask_smorest import Blueprint
from flask.views import MethodView
from flask_login import login_required, current_user

# project imports
from app.socials.schemas import LikeStateSchema
from app.socials.services import ReactionService, ReactionKind

# app imports
from .schemas import CommentSchema, CommentThreadSchema, CommentCreateSchema
from .services import CommentService

logger = logging.getLogger(__name__)

bp = Blueprint("comments", __name__, description="Product comment threads")


@bp.route("/products/<product_id>/comments")
class ProductComments(MethodView):
    @bp.response(200, CommentThreadSchema(many=True))
    def get(self, product_id):
        """Comment thread of a product, newest root first"""
        viewer_id = current_user.id if current_user.is_authenticated else None
        return CommentService.list_thread(product_id, viewer_id)

    @login_required
    @bp.arguments(CommentCreateSchema)
    @bp.response(201, CommentSchema)
    def post(self, comment_data, product_id):
        """Comment on a product or reply to one of its comments"""
        return CommentService.post_comment(
            product_id,
            current_user.id,
            comment_data["content"],
            comment_data.get("parent_id"),
        )


@bp.route("/comments/<int:comment_id>")
class CommentDetail(MethodView):
    @login_required
    @bp.response(204)
    def delete(self, comment_id):
        """Delete own comment; top-level comments take their replies along"""
        CommentService.delete_comment(comment_id, current_user.id)


@bp.route("/comments/<int:comment_id>/like")
class CommentLikeResource(MethodView):
    @bp.response(200, LikeStateSchema)
    def get(self, comment_id):
        viewer_id = current_user.id if current_user.is_authenticated else None
        return ReactionService.status(ReactionKind.COMMENT_LIKE, viewer_id, comment_id)

    @login_required
    @bp.response(200, LikeStateSchema)
    def post(self, comment_id):
        return ReactionService.add(
            ReactionKind.COMMENT_LIKE, current_user.id, comment_id
        )

    @login_required
    @bp.response(200, LikeStateSchema)
    def delete(self, comment_id):
        return ReactionService.remove(
            ReactionKind.COMMENT_LIKE, current_user.id, comment_id
        )
