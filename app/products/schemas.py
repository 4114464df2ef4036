from marshmallow import Schema, fields, validate

from app.categories.schemas import CategorySchema
from app.libs.schemas import CursorQueryArgs, UserSimpleSchema
from .constants import FEED_TYPES
from .models import ProductStatus


class ProductCreateSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=100))
    description = fields.Str(required=True, validate=validate.Length(min=1))
    detail = fields.Str(allow_none=True)
    website_url = fields.Str(data_key="websiteUrl", validate=validate.Length(max=500))
    github_url = fields.Str(
        data_key="githubUrl", allow_none=True, validate=validate.Length(max=500)
    )
    images = fields.List(fields.Str(validate=validate.Length(max=500)))
    # Count is checked by the service so that it surfaces as a 400
    category_ids = fields.List(fields.Int(), data_key="categoryIds")
    status = fields.Enum(ProductStatus, by_value=True)


class ProductUpdateSchema(ProductCreateSchema):
    """Loaded with partial=True, only supplied fields are changed"""


class ProductOwnerSchema(UserSimpleSchema):
    title = fields.Str(allow_none=True)


class ProductSchema(Schema):
    id = fields.Str(dump_only=True)
    name = fields.Str()
    description = fields.Str()
    detail = fields.Str(allow_none=True)
    image_url = fields.Str(data_key="imageUrl", allow_none=True)
    images = fields.List(fields.Str())
    website_url = fields.Str(data_key="websiteUrl")
    github_url = fields.Str(data_key="githubUrl", allow_none=True)
    status = fields.Enum(ProductStatus, by_value=True)
    likes = fields.Int()
    favorites = fields.Int()
    created_at = fields.DateTime(data_key="createdAt")
    updated_at = fields.DateTime(data_key="updatedAt")
    categories = fields.List(fields.Nested(CategorySchema))
    user = fields.Nested(ProductOwnerSchema)
    has_liked = fields.Bool(data_key="hasLiked")
    has_favorited = fields.Bool(data_key="hasFavorited")


class FeedItemSchema(ProductSchema):
    """Feed entry, without the long-form detail"""

    class Meta:
        exclude = ("detail",)


class FeedQueryArgs(CursorQueryArgs):
    category = fields.Str()
    search = fields.Str()
    type = fields.Str(validate=validate.OneOf(list(FEED_TYPES.values())))
    user_id = fields.Str(data_key="userId")
    status = fields.Enum(ProductStatus, by_value=True)


class FeedSchema(Schema):
    items = fields.List(fields.Nested(FeedItemSchema))
    next_cursor = fields.Str(data_key="nextCursor", allow_none=True)
