from marshmallow import Schema, fields, validate


class CursorQueryArgs(Schema):
    cursor = fields.Str(required=False)
    limit = fields.Int(required=False, validate=validate.Range(min=1))


class UserSimpleSchema(Schema):
    id = fields.Str()
    username = fields.Str()
    avatar = fields.Str(allow_none=True)
