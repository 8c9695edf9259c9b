# pawcircle/api/medical/schemas.py
from marshmallow import Schema, fields, validate

class MedicalRecordCreateSchema(Schema):
    """POST /api/medical/<pet_id>/records 요청 스키마."""
    pic_url = fields.URL(required=True, error_messages={"required": "의료 기록 이미지 URL은 필수입니다."})
    description = fields.Str(required=False, allow_none=True, validate=validate.Length(max=500))

class MedicalRecordResponseSchema(Schema):
    record_id = fields.Str(dump_only=True)
    pet_id = fields.Str(dump_only=True)
    pic_url = fields.Str()
    description = fields.Str(allow_none=True)
    created_at = fields.DateTime()
