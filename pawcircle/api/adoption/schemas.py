# pawcircle/api/adoption/schemas.py
from marshmallow import Schema, fields, validate

from pawcircle.models.adoption import HelpType, AdoptionStatus

HELP_TYPES = [e.value for e in HelpType]

class ListingCreateSchema(Schema):
    """POST /api/adoption/listings 요청 스키마."""
    type_of_help = fields.Str(required=True, validate=validate.OneOf(HELP_TYPES))
    description = fields.Str(required=True, validate=validate.Length(min=5, error="설명은 5자 이상이어야 합니다."))
    pic_url = fields.URL(required=True)

class ListingQuerySchema(Schema):
    type = fields.Str(required=False, validate=validate.OneOf(HELP_TYPES))

class ApplicationCreateSchema(Schema):
    message = fields.Str(load_default='', validate=validate.Length(max=1000))
    experience_with_pets = fields.Str(load_default='', validate=validate.Length(max=1000))
    living_arrangement = fields.Str(load_default='', validate=validate.Length(max=500))
    reason_for_adoption = fields.Str(load_default='', validate=validate.Length(max=1000))

class ApplicationReviewSchema(Schema):
    status = fields.Str(required=True, validate=validate.OneOf([
        AdoptionStatus.APPROVED.value, AdoptionStatus.REJECTED.value
    ]))
    review_comments = fields.Str(load_default='', validate=validate.Length(max=1000))

class ListingResponseSchema(Schema):
    listing_id = fields.Str()
    type_of_help = fields.Str()
    description = fields.Str()
    pic_url = fields.Str()
    created_by = fields.Str()
    created_at = fields.DateTime()

class ApplicationResponseSchema(Schema):
    request_id = fields.Str()
    listing_id = fields.Str()
    user_id = fields.Str()
    applicant_name = fields.Str()
    applicant_email = fields.Str()
    applicant_phone = fields.Str()
    message = fields.Str()
    experience_with_pets = fields.Str()
    living_arrangement = fields.Str()
    reason_for_adoption = fields.Str()
    status = fields.Str()
    reviewed_at = fields.DateTime(allow_none=True)
    reviewed_by = fields.Str(allow_none=True)
    review_comments = fields.Str()
    created_at = fields.DateTime()
    updated_at = fields.DateTime()
