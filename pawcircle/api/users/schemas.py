# pawcircle/api/users/schemas.py
from marshmallow import Schema, fields

class UserPublicResponseSchema(Schema):
    """
    GET /api/users/{user_id}
    다른 사용자의 프로필 정보를 응답할 때 사용하는 스키마.
    이메일, 전화번호 같은 연락처 정보는 제외합니다.
    """
    user_id = fields.Str(required=True, dump_only=True)
    user_name = fields.Str(required=True)
    name = fields.Str()
    pet_count = fields.Int(required=True)
    join_date = fields.DateTime()

class MyProfileResponseSchema(Schema):
    """GET /api/users/me 본인 프로필 응답 스키마."""
    user_id = fields.Str(dump_only=True)
    user_name = fields.Str()
    name = fields.Str()
    email = fields.Email()
    phone_no = fields.Str()
    pet_ids = fields.List(fields.Str())
    join_date = fields.DateTime()

class NotificationQuerySchema(Schema):
    unread_only = fields.Bool(load_default=False)

class NotificationResponseSchema(Schema):
    notification_id = fields.Str()
    recipient_id = fields.Str()
    sender_id = fields.Str()
    type = fields.Str()
    target_id = fields.Str()
    target_summary = fields.Str(allow_none=True)
    is_read = fields.Bool()
    created_at = fields.DateTime()
