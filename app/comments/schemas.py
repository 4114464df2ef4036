from marshmallow import Schema, fields

from app.libs.schemas import UserSimpleSchema


class CommentAuthorSchema(UserSimpleSchema):
    id = fields.Str(allow_none=True)
    username = fields.Str(allow_none=True)


class ReplyTargetSchema(Schema):
    id = fields.Str(allow_none=True)
    username = fields.Str()


class CommentSchema(Schema):
    id = fields.Int(dump_only=True)
    content = fields.Str()
    product_id = fields.Str(data_key="productId")
    parent_id = fields.Int(data_key="parentId", allow_none=True)
    root_id = fields.Int(data_key="rootId", allow_none=True)
    created_at = fields.DateTime(data_key="createdAt")
    likes = fields.Int()
    has_liked = fields.Bool(data_key="hasLiked")
    user = fields.Nested(CommentAuthorSchema)
    reply_to_user = fields.Nested(
        ReplyTargetSchema, data_key="replyToUser", allow_none=True
    )


class CommentThreadSchema(CommentSchema):
    """Root comment with its flattened replies"""

    replies = fields.List(fields.Nested(CommentSchema))


class CommentCreateSchema(Schema):
    content = fields.Str(required=True)
    parent_id = fields.Int(data_key="parentId", allow_none=True, load_default=None)
