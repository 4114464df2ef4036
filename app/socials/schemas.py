from marshmallow import Schema, fields, validate

from app.libs.schemas import UserSimpleSchema


class LikeStateSchema(Schema):
    """Product or comment like counter plus the caller's state"""

    success = fields.Bool()
    count = fields.Int(required=True)
    has_liked = fields.Bool(data_key="hasLiked", attribute="active")


class FavoriteStateSchema(Schema):
    success = fields.Bool()
    count = fields.Int(required=True)
    has_favorited = fields.Bool(data_key="hasFavorited", attribute="active")


class FollowStateSchema(Schema):
    success = fields.Bool()
    is_following = fields.Bool(data_key="isFollowing")


class FollowListArgs(Schema):
    type = fields.Str(
        load_default="following", validate=validate.OneOf(["following", "followers"])
    )


class FollowUserSchema(UserSimpleSchema):
    bio = fields.Str(allow_none=True)
    title = fields.Str(allow_none=True)
