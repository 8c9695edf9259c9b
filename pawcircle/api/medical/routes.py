# pawcircle/api/medical/routes.py
import logging
from dataclasses import asdict
from flask import Blueprint, request, jsonify, current_app, Response
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from .schemas import MedicalRecordCreateSchema, MedicalRecordResponseSchema

medical_bp = Blueprint('medical_bp', __name__)

@medical_bp.route('/<string:pet_id>/records', methods=['POST'])
@jwt_required()
def add_medical_record(pet_id: str):
    """[소유자 전용] 반려동물에 의료 기록 추가."""
    user_id = get_jwt_identity()
    medical_service = current_app.services['medical']
    try:
        data = MedicalRecordCreateSchema().load(request.get_json(silent=True) or {})
        record = medical_service.add_record(pet_id, user_id, data)
        return jsonify(MedicalRecordResponseSchema().dump(asdict(record))), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Add medical record API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "의료 기록 추가 중 오류가 발생했습니다."}), 500

@medical_bp.route('/<string:pet_id>/records', methods=['GET'])
@jwt_required()
def list_medical_records(pet_id: str):
    user_id = get_jwt_identity()
    medical_service = current_app.services['medical']
    try:
        records = medical_service.list_records(pet_id, user_id)
        return jsonify({"medical_records": MedicalRecordResponseSchema(many=True).dump([asdict(r) for r in records])}), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"List medical records API error (pet_id: {pet_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "의료 기록 조회 중 오류가 발생했습니다."}), 500

@medical_bp.route('/records/<string:record_id>', methods=['DELETE'])
@jwt_required()
def delete_medical_record(record_id: str):
    user_id = get_jwt_identity()
    medical_service = current_app.services['medical']
    try:
        medical_service.delete_record(record_id, user_id)
        return Response(status=204)
    except LookupError as e:
        return jsonify({"error_code": "RECORD_NOT_FOUND", "message": str(e)}), 404
    except FileNotFoundError as e:
        return jsonify({"error_code": "PET_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"Delete medical record API error (record_id: {record_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "의료 기록 삭제 중 오류가 발생했습니다."}), 500
