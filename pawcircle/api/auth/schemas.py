# pawcircle/api/auth/schemas.py
from marshmallow import Schema, fields, validate

class RegisterSchema(Schema):
    """POST /api/auth/register 요청 본문 스키마."""
    email = fields.Email(required=True)
    password = fields.Str(
        required=True, load_only=True,
        validate=validate.Length(min=6, error="비밀번호는 6자 이상이어야 합니다.")
    )
    name = fields.Str(required=True, validate=validate.Length(min=1))
    phone_no = fields.Str(required=True, validate=validate.Length(min=10, max=14))
    user_name = fields.Str(required=True, validate=validate.Length(min=1, max=30))

class LoginSchema(Schema):
    """POST /api/auth/login 요청 본문 스키마."""
    email = fields.Email(required=True)
    password = fields.Str(required=True, load_only=True, validate=validate.Length(min=6))

class LogoutRequestSchema(Schema):
    """로그아웃 시 함께 무효화할 Refresh Token (선택)."""
    refresh_token = fields.Str(required=False)

class UserInfoSchema(Schema):
    """로그인/회원가입 응답에 포함되는 사용자 정보."""
    user_id = fields.Str(dump_only=True)
    user_name = fields.Str()
    name = fields.Str()
    email = fields.Email()
    phone_no = fields.Str()
