# pawcircle/api/pets/schemas.py
from marshmallow import Schema, fields, validate
from pawcircle.models.pet import PetType, PetGender

PET_TYPES = [e.value for e in PetType]
PET_GENDERS = [e.value for e in PetGender]

class PetRegistrationSchema(Schema):
    """POST /api/pets/ 반려동물 등록 요청 스키마."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=30))
    pet_type = fields.Str(required=True, validate=validate.OneOf(PET_TYPES))
    breed = fields.Str(required=True, validate=validate.Length(min=1, max=50))
    age = fields.Int(required=True, validate=validate.Range(min=0, max=99, error="나이는 0~99 사이여야 합니다."))
    weight = fields.Float(required=True, validate=validate.Range(min=0, max=200.0, min_inclusive=False))
    gender = fields.Str(required=True, validate=validate.OneOf(PET_GENDERS))
    pic_url = fields.URL(required=False, allow_none=True)
    available_for_breeding = fields.Bool(required=False, load_default=False)

class PetUpdateSchema(Schema):
    """PATCH /api/pets/<pet_id> 부분 업데이트 스키마."""
    name = fields.Str(validate=validate.Length(min=1, max=30))
    pet_type = fields.Str(validate=validate.OneOf(PET_TYPES))
    breed = fields.Str(validate=validate.Length(min=1, max=50))
    age = fields.Int(validate=validate.Range(min=0, max=99))
    weight = fields.Float(validate=validate.Range(min=0, max=200.0, min_inclusive=False))
    gender = fields.Str(validate=validate.OneOf(PET_GENDERS))
    pic_url = fields.URL(allow_none=True)

class BreedingStatusSchema(Schema):
    """PUT /api/pets/<pet_id>/updateBreedingStatus 요청 스키마. "true"/"false" 문자열도 허용됩니다."""
    status = fields.Bool(required=True)

class PetResponseSchema(Schema):
    """반려동물 정보 응답 스키마."""
    pet_id = fields.Str(dump_only=True)
    user_id = fields.Str(dump_only=True)
    name = fields.Str()
    pet_type = fields.Str()
    breed = fields.Str()
    age = fields.Int()
    weight = fields.Float()
    gender = fields.Str()
    pic_url = fields.Str(allow_none=True)
    available_for_breeding = fields.Bool()
    medical_record_ids = fields.List(fields.Str())
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
