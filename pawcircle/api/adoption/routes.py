# pawcircle/api/adoption/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from pawcircle.models.adoption import HelpType, AdoptionStatus
from .services import DuplicateApplicationError, InvalidApplicationStateError
from .schemas import (
    ListingCreateSchema, ListingQuerySchema, ApplicationCreateSchema, ApplicationReviewSchema,
    ListingResponseSchema, ApplicationResponseSchema
)

adoption_bp = Blueprint('adoption_bp', __name__)

# --- 구조/입양 게시글 ---
@adoption_bp.route('/listings', methods=['POST'])
@jwt_required()
def create_listing():
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoption']
    try:
        data = ListingCreateSchema().load(request.get_json(silent=True) or {})
        listing = adoption_service.create_listing(user_id, data)
        return jsonify(ListingResponseSchema().dump(listing.to_dict())), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"Create rescue listing API error: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "게시글 작성 중 오류가 발생했습니다."}), 500

@adoption_bp.route('/listings', methods=['GET'])
@jwt_required(optional=True)
def list_listings():
    """게시글 목록. ?type=Rescue|Adopt 로 필터링할 수 있습니다."""
    adoption_service = current_app.services['adoption']
    try:
        query = ListingQuerySchema().load(request.args)
        type_of_help = HelpType(query['type']) if 'type' in query else None
        listings = adoption_service.list_listings(type_of_help)
        return jsonify({"listings": ListingResponseSchema(many=True).dump([l.to_dict() for l in listings])}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"List rescue listings API error: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "게시글 목록 조회 중 오류가 발생했습니다."}), 500

@adoption_bp.route('/listings/<string:listing_id>', methods=['GET'])
@jwt_required(optional=True)
def get_listing(listing_id: str):
    adoption_service = current_app.services['adoption']
    try:
        listing = adoption_service.get_listing(listing_id)
        return jsonify(ListingResponseSchema().dump(listing.to_dict())), 200
    except LookupError as e:
        return jsonify({"error_code": "LISTING_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Get rescue listing API error (listing_id: {listing_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "게시글 조회 중 오류가 발생했습니다."}), 500

# --- 입양 신청 ---
@adoption_bp.route('/listings/<string:listing_id>/applications', methods=['POST'])
@jwt_required()
def submit_application(listing_id: str):
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoption']
    try:
        data = ApplicationCreateSchema().load(request.get_json(silent=True) or {})
        application = adoption_service.submit_application(listing_id, user_id, data)
        return jsonify(ApplicationResponseSchema().dump(application.to_dict())), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except LookupError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
    except DuplicateApplicationError as e:
        return jsonify({"error_code": "DUPLICATE_APPLICATION", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"Submit adoption application API error (listing_id: {listing_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "입양 신청 중 오류가 발생했습니다."}), 500

@adoption_bp.route('/listings/<string:listing_id>/applications', methods=['GET'])
@jwt_required()
def list_listing_applications(listing_id: str):
    """[게시글 작성자 전용] 게시글에 들어온 신청서 목록."""
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoption']
    try:
        applications = adoption_service.list_listing_applications(listing_id, user_id)
        return jsonify({"applications": ApplicationResponseSchema(many=True).dump([a.to_dict() for a in applications])}), 200
    except LookupError as e:
        return jsonify({"error_code": "LISTING_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"List listing applications API error (listing_id: {listing_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "신청서 목록 조회 중 오류가 발생했습니다."}), 500

@adoption_bp.route('/applications/me', methods=['GET'])
@jwt_required()
def list_my_applications():
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoption']
    try:
        applications = adoption_service.list_my_applications(user_id)
        return jsonify({"applications": ApplicationResponseSchema(many=True).dump([a.to_dict() for a in applications])}), 200
    except Exception as e:
        logging.error(f"List my applications API error (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "신청서 목록 조회 중 오류가 발생했습니다."}), 500

@adoption_bp.route('/applications/<string:request_id>', methods=['GET'])
@jwt_required()
def get_application(request_id: str):
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoption']
    try:
        application = adoption_service.get_application(request_id, user_id)
        return jsonify(ApplicationResponseSchema().dump(application.to_dict())), 200
    except LookupError as e:
        return jsonify({"error_code": "APPLICATION_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Get application API error (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "신청서 조회 중 오류가 발생했습니다."}), 500

@adoption_bp.route('/applications/<string:request_id>/review', methods=['PATCH'])
@jwt_required()
def review_application(request_id: str):
    """[게시글 작성자 전용] 신청서 승인/거절."""
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoption']
    try:
        data = ApplicationReviewSchema().load(request.get_json(silent=True) or {})
        application = adoption_service.review_application(
            request_id, user_id, AdoptionStatus(data['status']), data['review_comments']
        )
        return jsonify(ApplicationResponseSchema().dump(application.to_dict())), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except LookupError as e:
        return jsonify({"error_code": "APPLICATION_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except InvalidApplicationStateError as e:
        return jsonify({"error_code": "APPLICATION_ALREADY_RESOLVED", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"Review application API error (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "신청서 심사 중 오류가 발생했습니다."}), 500

@adoption_bp.route('/applications/<string:request_id>/withdraw', methods=['POST'])
@jwt_required()
def withdraw_application(request_id: str):
    """[신청자 전용] 대기 중인 신청서 철회."""
    user_id = get_jwt_identity()
    adoption_service = current_app.services['adoption']
    try:
        application = adoption_service.withdraw_application(request_id, user_id)
        return jsonify(ApplicationResponseSchema().dump(application.to_dict())), 200
    except LookupError as e:
        return jsonify({"error_code": "APPLICATION_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except InvalidApplicationStateError as e:
        return jsonify({"error_code": "APPLICATION_ALREADY_RESOLVED", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"Withdraw application API error (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "신청서 철회 중 오류가 발생했습니다."}), 500
