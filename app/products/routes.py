# package imports
import logging
from flask_smorest import Blueprint
from flask.views import MethodView
from flask_login import login_required, current_user

# project imports
from app.socials.schemas import LikeStateSchema, FavoriteStateSchema
from app.socials.services import ReactionService, ReactionKind

# app imports
from .schemas import (
    FeedQueryArgs,
    FeedSchema,
    ProductCreateSchema,
    ProductUpdateSchema,
    ProductSchema,
)
from .services import ProductService, FeedService

logger = logging.getLogger(__name__)

bp = Blueprint(
    "products", __name__, description="Product operations", url_prefix="/products"
)


def _viewer_id():
    return current_user.id if current_user.is_authenticated else None


@bp.route("")
class ProductList(MethodView):
    @bp.arguments(FeedQueryArgs, location="query")
    @bp.response(200, FeedSchema)
    def get(self, args):
        """Product feed: category, relationship and search views"""
        return FeedService.get_feed(args, _viewer_id())

    @login_required
    @bp.arguments(ProductCreateSchema)
    @bp.response(201, ProductSchema)
    def post(self, product_data):
        """Create a product, as a draft unless a status is given"""
        return ProductService.create_product(product_data, current_user.id)


@bp.route("/<product_id>")
class ProductDetail(MethodView):
    @bp.response(200, ProductSchema)
    def get(self, product_id):
        return ProductService.get_product(product_id, _viewer_id())

    @login_required
    @bp.arguments(ProductUpdateSchema(partial=True))
    @bp.response(200, ProductSchema)
    def put(self, product_data, product_id):
        """Update own product"""
        return ProductService.update_product(product_id, current_user.id, product_data)

    @login_required
    @bp.response(204)
    def delete(self, product_id):
        """Delete own product with its comments and reactions"""
        ProductService.delete_product(product_id, current_user.id)


@bp.route("/<product_id>/like")
class ProductLike(MethodView):
    @bp.response(200, LikeStateSchema)
    def get(self, product_id):
        return ReactionService.status(ReactionKind.LIKE, _viewer_id(), product_id)

    @login_required
    @bp.response(200, LikeStateSchema)
    def post(self, product_id):
        return ReactionService.add(ReactionKind.LIKE, current_user.id, product_id)

    @login_required
    @bp.response(200, LikeStateSchema)
    def delete(self, product_id):
        return ReactionService.remove(ReactionKind.LIKE, current_user.id, product_id)


@bp.route("/<product_id>/favorite")
class ProductFavorite(MethodView):
    @bp.response(200, FavoriteStateSchema)
    def get(self, product_id):
        return ReactionService.status(ReactionKind.FAVORITE, _viewer_id(), product_id)

    @login_required
    @bp.response(200, FavoriteStateSchema)
    def post(self, product_id):
        return ReactionService.add(ReactionKind.FAVORITE, current_user.id, product_id)

    @login_required
    @bp.response(200, FavoriteStateSchema)
    def delete(self, product_id):
        return ReactionService.remove(
            ReactionKind.FAVORITE, current_user.id, product_id
        )
