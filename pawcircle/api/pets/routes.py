# pawcircle/api/pets/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app, Response
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from .schemas import (
    PetRegistrationSchema,
    PetUpdateSchema,
    BreedingStatusSchema,
    PetResponseSchema
)

pets_bp = Blueprint('pets_bp', __name__)

@pets_bp.route('/', methods=['POST'])
@jwt_required()
def register_pet():
    """반려동물 등록 API. 소유자는 토큰의 사용자입니다."""
    user_id = get_jwt_identity()
    pet_service = current_app.services['pets']
    try:
        validated_data = PetRegistrationSchema().load(request.get_json(silent=True) or {})
        new_pet = pet_service.register_pet(user_id, validated_data)
        return jsonify(PetResponseSchema().dump(new_pet.to_dict())), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Pet registration API error: {e}", exc_info=True)
        return jsonify({"error_code": "PET_REGISTRATION_FAILED", "message": "반려동물 등록 중 오류가 발생했습니다."}), 500

@pets_bp.route('/', methods=['GET'])
@jwt_required()
def list_my_pets():
    """로그인한 사용자의 반려동물 목록."""
    user_id = get_jwt_identity()
    return _list_pets_of(user_id)

@pets_bp.route('/<string:user_id>/returnPets', methods=['GET'])
@jwt_required()
def list_user_pets(user_id: str):
    """특정 사용자의 반려동물 목록."""
    return _list_pets_of(user_id)

def _list_pets_of(user_id: str):
    pet_service = current_app.services['pets']
    try:
        pets = pet_service.get_pets_for_user(user_id)
        return jsonify({"pets": PetResponseSchema(many=True).dump([p.to_dict() for p in pets])}), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"List pets API error (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "반려동물 목록 조회 중 오류가 발생했습니다."}), 500

@pets_bp.route('/<string:pet_id>', methods=['GET'])
@jwt_required()
def get_pet(pet_id: str):
    pet_service = current_app.services['pets']
    try:
        pet = pet_service.get_pet(pet_id)
        return jsonify(PetResponseSchema().dump(pet.to_dict())), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"Get pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "반려동물 조회 중 오류가 발생했습니다."}), 500

@pets_bp.route('/<string:pet_id>', methods=['PATCH'])
@jwt_required()
def update_pet(pet_id: str):
    """[소유자 전용] 반려동물 정보 부분 수정."""
    user_id = get_jwt_identity()
    pet_service = current_app.services['pets']
    try:
        update_data = PetUpdateSchema().load(request.get_json(silent=True) or {})
        if not update_data:
            return jsonify({"error_code": "NO_UPDATE_DATA", "message": "수정할 필드를 하나 이상 입력해주세요."}), 400
        updated_pet = pet_service.update_pet(pet_id, user_id, update_data)
        return jsonify(PetResponseSchema().dump(updated_pet.to_dict())), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Update pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "반려동물 정보 수정 중 오류가 발생했습니다."}), 500

@pets_bp.route('/<string:pet_id>/updateBreedingStatus', methods=['PUT'])
@jwt_required()
def update_breeding_status(pet_id: str):
    """[소유자 전용] 교배 가능 여부 변경."""
    user_id = get_jwt_identity()
    pet_service = current_app.services['pets']
    try:
        data = BreedingStatusSchema().load(request.get_json(silent=True) or {})
        updated_pet = pet_service.set_breeding_availability(pet_id, user_id, data['status'])
        return jsonify(PetResponseSchema().dump(updated_pet.to_dict())), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Breeding status API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "교배 상태 변경 중 오류가 발생했습니다."}), 500

@pets_bp.route('/<string:pet_id>', methods=['DELETE'])
@jwt_required()
def delete_pet(pet_id: str):
    """[소유자 전용] 반려동물 삭제 (의료 기록, 매칭 요청/결과 함께 삭제)."""
    user_id = get_jwt_identity()
    pet_service = current_app.services['pets']
    try:
        pet_service.delete_pet(pet_id, user_id)
        return Response(status=204)
    except FileNotFoundError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Delete pet API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "반려동물 삭제 중 오류가 발생했습니다."}), 500
