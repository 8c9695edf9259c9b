# pawcircle/api/petmate/schemas.py
from marshmallow import Schema, fields, validate

from pawcircle.models.breeding import BreedingDecision, BreedingStatus
from pawcircle.api.pets.schemas import PetResponseSchema

# Firestore 문서 ID로 쓸 수 있는 식별자 형식
ID_PATTERN = r'^[A-Za-z0-9_-]+$'

class BreedingRequestPathSchema(Schema):
    """POST /api/petmate/<reqPetId>/requestBreeding/<resPetId> 경로 파라미터 검증 스키마."""
    requester_pet_id = fields.Str(required=True, validate=[
        validate.Length(min=1, max=128),
        validate.Regexp(ID_PATTERN, error="올바르지 않은 반려동물 ID 형식입니다.")
    ])
    requested_pet_id = fields.Str(required=True, validate=[
        validate.Length(min=1, max=128),
        validate.Regexp(ID_PATTERN, error="올바르지 않은 반려동물 ID 형식입니다.")
    ])

class MatchDecisionSchema(Schema):
    """POST /api/petmate/<requestId>/matchPets 요청 본문. status는 Accept 또는 Reject."""
    status = fields.Str(required=True, validate=validate.OneOf([d.value for d in BreedingDecision]))

class RequestListQuerySchema(Schema):
    """GET /pendingRequest 쿼리 파라미터. status를 주면 해당 상태의 요청만 반환합니다."""
    status = fields.Str(required=False, validate=validate.OneOf([
        BreedingStatus.PENDING.value, BreedingStatus.REJECTED.value
    ]))

class BreedingRequestResponseSchema(Schema):
    request_id = fields.Str()
    requester_pet_id = fields.Str()
    requested_pet_id = fields.Str()
    requester_user_id = fields.Str()
    requested_user_id = fields.Str()
    status = fields.Str()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
    # 목록 조회 시에만 채워지는 필드
    requester_pet = fields.Nested(PetResponseSchema, allow_none=True)
    requested_pet = fields.Nested(PetResponseSchema, allow_none=True)
    direction = fields.Str()

class MatchResponseSchema(Schema):
    match_id = fields.Str()
    pet1_id = fields.Str()
    pet2_id = fields.Str()
    user_of_pet1_id = fields.Str()
    user_of_pet2_id = fields.Str()
    created_at = fields.DateTime()
    pet1 = fields.Nested(PetResponseSchema, allow_none=True)
    pet2 = fields.Nested(PetResponseSchema, allow_none=True)
