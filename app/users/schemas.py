from marshmallow import Schema, fields


class UserStatsSchema(Schema):
    following_count = fields.Int(data_key="followingCount")
    followers_count = fields.Int(data_key="followersCount")
    likes_count = fields.Int(data_key="likesCount")
    favorites_count = fields.Int(data_key="favoritesCount")
    published_products_count = fields.Int(data_key="publishedProductsCount")
    total_likes_and_favorites = fields.Int(data_key="totalLikesAndFavorites")


class UserProfileSchema(Schema):
    id = fields.Str(dump_only=True)
    username = fields.Str()
    avatar = fields.Str(allow_none=True)
    bio = fields.Str(allow_none=True)
    title = fields.Str(allow_none=True)
    contact = fields.List(fields.Str())
    created_at = fields.DateTime(data_key="createdAt")
    stats = fields.Nested(UserStatsSchema)
    is_following = fields.Bool(data_key="isFollowing")


class UserDeletionSchema(Schema):
    success = fields.Bool()
    products = fields.Int()
    comments = fields.Int()
