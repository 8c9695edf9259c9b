# pawcircle/api/users/routes.py
import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from pawcircle.api.users.schemas import (
    UserPublicResponseSchema, MyProfileResponseSchema,
    NotificationQuerySchema, NotificationResponseSchema
)

users_bp = Blueprint('users_bp', __name__)

@users_bp.route('/me', methods=['GET'])
@jwt_required()
def get_my_profile():
    """현재 로그인된 사용자의 프로필 (연락처 포함)."""
    user_service = current_app.services['users']
    user_id = get_jwt_identity()
    try:
        profile = user_service.get_my_profile(user_id)
        if not profile:
            return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
        return jsonify(MyProfileResponseSchema().dump(profile)), 200
    except Exception as e:
        logging.error(f"내 프로필 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PROFILE_FETCH_FAILED", "message": "프로필 조회 중 오류가 발생했습니다."}), 500

@users_bp.route('/me/notifications', methods=['GET'])
@jwt_required()
def get_my_notifications():
    """내 알림 목록 (최신순). ?unread_only=true 로 읽지 않은 알림만 조회합니다."""
    notification_service = current_app.services['notifications']
    user_id = get_jwt_identity()
    try:
        query = NotificationQuerySchema().load(request.args)
        notifications = notification_service.get_notifications(user_id, unread_only=query['unread_only'])
        return jsonify({"notifications": NotificationResponseSchema(many=True).dump(notifications)}), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except Exception as e:
        logging.error(f"알림 목록 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "알림 목록 조회 중 오류가 발생했습니다."}), 500

@users_bp.route('/me/notifications/<string:notification_id>/read', methods=['PATCH'])
@jwt_required()
def mark_notification_as_read(notification_id: str):
    notification_service = current_app.services['notifications']
    user_id = get_jwt_identity()
    try:
        notification = notification_service.mark_as_read(user_id, notification_id)
        return jsonify(NotificationResponseSchema().dump(notification)), 200
    except FileNotFoundError as e:
        return jsonify({"error_code": "NOTIFICATION_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"알림 읽음 처리 중 오류 발생 (notification_id: {notification_id}): {e}", exc_info=True)
        return jsonify({"error_code": "UPDATE_FAILED", "message": "알림 읽음 처리 중 오류가 발생했습니다."}), 500

@users_bp.route('/<string:user_id>', methods=['GET'])
@jwt_required(optional=True)
def get_user_profile(user_id: str):
    """특정 사용자의 공개 프로필 정보(반려동물 수 포함)를 조회합니다."""
    user_service = current_app.services['users']
    try:
        user_profile = user_service.get_user_profile(user_id)
        if not user_profile:
            return jsonify({"error_code": "USER_NOT_FOUND", "message": "사용자를 찾을 수 없습니다."}), 404
        return jsonify(UserPublicResponseSchema().dump(user_profile)), 200
    except Exception as e:
        logging.error(f"사용자 프로필 조회 중 오류 발생 (user_id: {user_id}): {e}", exc_info=True)
        return jsonify({"error_code": "PROFILE_FETCH_FAILED", "message": "프로필 조회 중 오류가 발생했습니다."}), 500
