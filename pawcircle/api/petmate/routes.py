# pawcircle/api/petmate/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from pawcircle.models.breeding import BreedingDecision, BreedingStatus
from pawcircle.api.pets.schemas import PetResponseSchema
from .exceptions import PetMateError
from .schemas import (
    BreedingRequestPathSchema,
    MatchDecisionSchema,
    RequestListQuerySchema,
    BreedingRequestResponseSchema,
    MatchResponseSchema
)

petmate_bp = Blueprint('petmate_bp', __name__)

def _error_response(e: PetMateError):
    return jsonify({"error_code": e.error_code, "message": e.message}), e.status_code

def _forbid_other_user(user_id: str):
    """목록 조회는 본인 것만 가능합니다. 다른 사용자면 403 응답을, 본인이면 None을 반환합니다."""
    if get_jwt_identity() != user_id:
        return jsonify({"error_code": "FORBIDDEN", "message": "본인의 정보만 조회할 수 있습니다."}), 403
    return None

@petmate_bp.route('/<string:user_id>/getPetMates', methods=['GET'])
@jwt_required()
def get_pet_mates(user_id: str):
    """교배 후보 목록: 다른 사용자의 교배 가능한 반려동물."""
    forbidden = _forbid_other_user(user_id)
    if forbidden:
        return forbidden
    petmate_service = current_app.services['petmate']
    try:
        pets = petmate_service.list_candidates(user_id)
        return jsonify({"pets": PetResponseSchema(many=True).dump([p.to_dict() for p in pets])}), 200
    except PetMateError as e:
        return _error_response(e)
    except Exception as e:
        logging.error(f"Get pet mates API error (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "교배 후보 조회 중 오류가 발생했습니다."}), 500

@petmate_bp.route('/<string:requester_pet_id>/requestBreeding/<string:requested_pet_id>', methods=['POST'])
@jwt_required()
def request_breeding(requester_pet_id: str, requested_pet_id: str):
    """내 반려동물(requester)로 상대 반려동물(requested)에게 매칭을 요청합니다."""
    user_id = get_jwt_identity()
    petmate_service = current_app.services['petmate']
    try:
        path_data = BreedingRequestPathSchema().load({
            'requester_pet_id': requester_pet_id,
            'requested_pet_id': requested_pet_id
        })
        new_request = petmate_service.request_breeding(
            user_id, path_data['requester_pet_id'], path_data['requested_pet_id']
        )
        return jsonify({
            "message": "매칭 요청을 보냈습니다.",
            "breeding_request": BreedingRequestResponseSchema().dump(new_request.to_dict())
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PetMateError as e:
        return _error_response(e)
    except Exception as e:
        logging.error(f"Breeding request API error ({requester_pet_id} -> {requested_pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "매칭 요청 중 오류가 발생했습니다."}), 500

@petmate_bp.route('/<string:request_id>/matchPets', methods=['POST'])
@jwt_required()
def match_pets(request_id: str):
    """[요청받은 반려동물 소유자 전용] 매칭 요청 수락(Accept) 또는 거절(Reject)."""
    user_id = get_jwt_identity()
    petmate_service = current_app.services['petmate']
    try:
        data = MatchDecisionSchema().load(request.get_json(silent=True) or {})
        result = petmate_service.resolve_request(user_id, request_id, BreedingDecision(data['status']))
        if result['status'] == BreedingStatus.APPROVED.value:
            return jsonify({
                "status": result['status'],
                "match": MatchResponseSchema().dump(result['match'])
            }), 200
        return jsonify({
            "status": result['status'],
            "breeding_request": BreedingRequestResponseSchema().dump(result['breeding_request'])
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PetMateError as e:
        return _error_response(e)
    except Exception as e:
        logging.error(f"Match pets API error (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "매칭 처리 중 오류가 발생했습니다."}), 500

@petmate_bp.route('/<string:user_id>/pendingRequest', methods=['GET'])
@jwt_required()
def get_requests(user_id: str):
    """보낸/받은 매칭 요청 목록."""
    forbidden = _forbid_other_user(user_id)
    if forbidden:
        return forbidden
    petmate_service = current_app.services['petmate']
    try:
        query = RequestListQuerySchema().load(request.args)
        status = BreedingStatus(query['status']) if 'status' in query else None
        breeding_requests = petmate_service.list_requests(user_id, status=status)
        return jsonify({"breeding_requests": BreedingRequestResponseSchema(many=True).dump(breeding_requests)}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except PetMateError as e:
        return _error_response(e)
    except Exception as e:
        logging.error(f"List breeding requests API error (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "매칭 요청 목록 조회 중 오류가 발생했습니다."}), 500

@petmate_bp.route('/<string:user_id>/matches', methods=['GET'])
@jwt_required()
def get_matches(user_id: str):
    forbidden = _forbid_other_user(user_id)
    if forbidden:
        return forbidden
    petmate_service = current_app.services['petmate']
    try:
        matches = petmate_service.list_matches(user_id)
        return jsonify({"matches": MatchResponseSchema(many=True).dump(matches)}), 200
    except PetMateError as e:
        return _error_response(e)
    except Exception as e:
        logging.error(f"List matches API error (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "매칭 결과 조회 중 오류가 발생했습니다."}), 500

@petmate_bp.route('/requests/<string:request_id>', methods=['DELETE'])
@jwt_required()
def withdraw_request(request_id: str):
    """[요청자 전용] 대기 중인 매칭 요청 취소."""
    user_id = get_jwt_identity()
    petmate_service = current_app.services['petmate']
    try:
        petmate_service.withdraw_request(user_id, request_id)
        return Response(status=204)
    except PetMateError as e:
        return _error_response(e)
    except Exception as e:
        logging.error(f"Withdraw breeding request API error (request_id: {request_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "매칭 요청 취소 중 오류가 발생했습니다."}), 500
