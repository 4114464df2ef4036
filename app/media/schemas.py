from marshmallow import Schema, fields, validate


class MediaUploadArgs(Schema):
    type = fields.Str(
        load_default="cover", validate=validate.OneOf(["avatar", "cover"])
    )


class MediaUploadResponseSchema(Schema):
    url = fields.Str(required=True)
