# package imports
import logging
from flask_smorest import Blueprint
from flask.views import MethodView
from flask_login import login_required, current_user

# project imports
from main.middleware import role_required
from app.socials.schemas import FollowStateSchema, FollowListArgs, FollowUserSchema
from app.socials.services import FollowService

# app imports
from .schemas import UserProfileSchema, UserStatsSchema, UserDeletionSchema
from .services import UserService

logger = logging.getLogger(__name__)

bp = Blueprint("users", __name__, description="User operations", url_prefix="/users")


@bp.route("/me/stats")
class MyStats(MethodView):
    @login_required
    @bp.response(200, UserStatsSchema)
    def get(self):
        """Follow counts and reaction totals of the signed-in user"""
        return UserService.get_stats(current_user.id)


@bp.route("/me/follows")
class MyFollows(MethodView):
    @login_required
    @bp.arguments(FollowListArgs, location="query")
    @bp.response(200, FollowUserSchema(many=True))
    def get(self, args):
        """Users the signed-in user follows, or their followers"""
        return FollowService.list_follows(current_user.id, args["type"])


@bp.route("/<user_id>")
class UserDetail(MethodView):
    @bp.response(200, UserProfileSchema)
    def get(self, user_id):
        """Public profile with stats"""
        viewer_id = current_user.id if current_user.is_authenticated else None
        return UserService.get_profile(user_id, viewer_id)

    @login_required
    @role_required("admin")
    @bp.response(200, UserDeletionSchema)
    def delete(self, user_id):
        """Delete a user and all of their content (admin only)"""
        result = UserService.delete_user(user_id)
        logger.info(f"Admin {current_user.id} deleted user {user_id}")
        return {"success": True, **result}


@bp.route("/<user_id>/follow")
class UserFollow(MethodView):
    @bp.response(200, FollowStateSchema)
    def get(self, user_id):
        viewer_id = current_user.id if current_user.is_authenticated else None
        return {"is_following": FollowService.is_following(viewer_id, user_id)}

    @login_required
    @bp.response(200, FollowStateSchema)
    def post(self, user_id):
        return FollowService.follow(current_user.id, user_id)

    @login_required
    @bp.response(200, FollowStateSchema)
    def delete(self, user_id):
        return FollowService.unfollow(current_user.id, user_id)
