from marshmallow import Schema, fields, validate

from .models import CategoryType


class CategorySchema(Schema):
    id = fields.Int(dump_only=True)
    name = fields.Str()
    slug = fields.Str()
    icon = fields.Str(allow_none=True)
    type = fields.Str(validate=validate.OneOf([t.value for t in CategoryType]))
    order = fields.Int()
