# pawcircle/api/forum/schemas.py
from marshmallow import Schema, fields, validate

class CategoryCreateSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=12, error="카테고리 이름은 12자 이하여야 합니다."))
    tags = fields.List(fields.Str(validate=validate.Length(min=1, max=10)), load_default=list)
    pic_url = fields.URL(required=False, allow_none=True)

class TopicCreateSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=2))
    content = fields.Str(required=True, validate=validate.Length(min=10, max=60))
    pic_url = fields.URL(required=False, allow_none=True)

class TopicUpdateSchema(Schema):
    name = fields.Str(validate=validate.Length(min=2))
    content = fields.Str(validate=validate.Length(min=10, max=60))
    pic_url = fields.URL(allow_none=True)

class ReplyCreateSchema(Schema):
    content = fields.Str(required=True, validate=validate.Length(min=1))
    pics = fields.List(fields.URL(), load_default=list)

class AuthorSchema(Schema):
    user_id = fields.Str()
    user_name = fields.Str(allow_none=True)

class CategoryResponseSchema(Schema):
    category_id = fields.Str()
    name = fields.Str()
    tags = fields.List(fields.Str())
    created_by = fields.Str()
    pic_url = fields.Str(allow_none=True)
    topic_count = fields.Int()
    created_at = fields.DateTime()

class TopicResponseSchema(Schema):
    topic_id = fields.Str()
    category_id = fields.Str()
    name = fields.Str()
    content = fields.Str()
    author = fields.Nested(AuthorSchema)
    pic_url = fields.Str(allow_none=True)
    reply_count = fields.Int()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()

class ReplyResponseSchema(Schema):
    reply_id = fields.Str()
    topic_id = fields.Str()
    content = fields.Str()
    author = fields.Nested(AuthorSchema)
    pics = fields.List(fields.Str())
    created_at = fields.DateTime()
