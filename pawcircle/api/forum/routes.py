# pawcircle/api/forum/routes.py
import logging
from dataclasses import asdict
from flask import Blueprint, request, jsonify, current_app, Response
from flask_jwt_extended import jwt_required, get_jwt_identity
from marshmallow import ValidationError

from .services import CategoryAlreadyExistsError
from .schemas import (
    CategoryCreateSchema, TopicCreateSchema, TopicUpdateSchema, ReplyCreateSchema,
    CategoryResponseSchema, TopicResponseSchema, ReplyResponseSchema
)

forum_bp = Blueprint('forum_bp', __name__)

# --- 카테고리 ---
@forum_bp.route('/categories', methods=['POST'])
@jwt_required()
def create_category():
    user_id = get_jwt_identity()
    forum_service = current_app.services['forum']
    try:
        data = CategoryCreateSchema().load(request.get_json(silent=True) or {})
        category = forum_service.create_category(user_id, data)
        return jsonify(CategoryResponseSchema().dump(asdict(category))), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except CategoryAlreadyExistsError as e:
        return jsonify({"error_code": "CATEGORY_ALREADY_EXISTS", "message": str(e)}), 409
    except Exception as e:
        logging.error(f"카테고리 생성 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "카테고리 생성 중 오류가 발생했습니다."}), 500

@forum_bp.route('/categories', methods=['GET'])
@jwt_required(optional=True)
def list_categories():
    forum_service = current_app.services['forum']
    try:
        categories = forum_service.list_categories()
        return jsonify({"categories": CategoryResponseSchema(many=True).dump([asdict(c) for c in categories])}), 200
    except Exception as e:
        logging.error(f"카테고리 목록 조회 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "카테고리 목록 조회 중 오류가 발생했습니다."}), 500

# --- 토픽 ---
@forum_bp.route('/categories/<string:category_id>/topics', methods=['POST'])
@jwt_required()
def create_topic(category_id: str):
    user_id = get_jwt_identity()
    forum_service = current_app.services['forum']
    try:
        data = TopicCreateSchema().load(request.get_json(silent=True) or {})
        topic = forum_service.create_topic(category_id, user_id, data)
        return jsonify(TopicResponseSchema().dump(asdict(topic))), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except LookupError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"토픽 생성 중 오류 발생 (category_id: {category_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "토픽 생성 중 오류가 발생했습니다."}), 500

@forum_bp.route('/categories/<string:category_id>/topics', methods=['GET'])
@jwt_required(optional=True)
def list_topics(category_id: str):
    forum_service = current_app.services['forum']
    try:
        topics = forum_service.list_topics(category_id)
        return jsonify({"topics": TopicResponseSchema(many=True).dump([asdict(t) for t in topics])}), 200
    except LookupError as e:
        return jsonify({"error_code": "CATEGORY_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"토픽 목록 조회 중 오류 발생 (category_id: {category_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "토픽 목록 조회 중 오류가 발생했습니다."}), 500

@forum_bp.route('/topics/<string:topic_id>', methods=['GET'])
@jwt_required(optional=True)
def get_topic(topic_id: str):
    forum_service = current_app.services['forum']
    try:
        topic = forum_service.get_topic(topic_id)
        return jsonify(TopicResponseSchema().dump(asdict(topic))), 200
    except LookupError as e:
        return jsonify({"error_code": "TOPIC_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"토픽 조회 중 오류 발생 (topic_id: {topic_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "토픽 조회 중 오류가 발생했습니다."}), 500

@forum_bp.route('/topics/<string:topic_id>', methods=['PATCH'])
@jwt_required()
def update_topic(topic_id: str):
    """[작성자 전용] 토픽 수정."""
    user_id = get_jwt_identity()
    forum_service = current_app.services['forum']
    try:
        update_data = TopicUpdateSchema().load(request.get_json(silent=True) or {})
        if not update_data:
            return jsonify({"error_code": "NO_UPDATE_DATA", "message": "수정할 필드를 하나 이상 입력해주세요."}), 400
        topic = forum_service.update_topic(topic_id, user_id, update_data)
        return jsonify(TopicResponseSchema().dump(asdict(topic))), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except LookupError as e:
        return jsonify({"error_code": "TOPIC_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"토픽 수정 중 오류 발생 (topic_id: {topic_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "토픽 수정 중 오류가 발생했습니다."}), 500

@forum_bp.route('/topics/<string:topic_id>', methods=['DELETE'])
@jwt_required()
def delete_topic(topic_id: str):
    """[작성자 전용] 토픽 삭제 (답글 포함)."""
    user_id = get_jwt_identity()
    forum_service = current_app.services['forum']
    try:
        forum_service.delete_topic(topic_id, user_id)
        return Response(status=204)
    except LookupError as e:
        return jsonify({"error_code": "TOPIC_NOT_FOUND", "message": str(e)}), 404
    except PermissionError as e:
        return jsonify({"error_code": "FORBIDDEN", "message": str(e)}), 403
    except Exception as e:
        logging.error(f"토픽 삭제 중 오류 발생 (topic_id: {topic_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "토픽 삭제 중 오류가 발생했습니다."}), 500

# --- 답글 ---
@forum_bp.route('/topics/<string:topic_id>/replies', methods=['POST'])
@jwt_required()
def create_reply(topic_id: str):
    user_id = get_jwt_identity()
    forum_service = current_app.services['forum']
    try:
        data = ReplyCreateSchema().load(request.get_json(silent=True) or {})
        reply = forum_service.create_reply(topic_id, user_id, data)
        return jsonify(ReplyResponseSchema().dump(asdict(reply))), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except LookupError as e:
        return jsonify({"error_code": "NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"답글 작성 중 오류 발생 (topic_id: {topic_id}): {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "답글 작성 중 오류가 발생했습니다."}), 500

@forum_bp.route('/topics/<string:topic_id>/replies', methods=['GET'])
@jwt_required(optional=True)
def list_replies(topic_id: str):
    forum_service = current_app.services['forum']
    try:
        replies = forum_service.list_replies(topic_id)
        return jsonify({"replies": ReplyResponseSchema(many=True).dump([asdict(r) for r in replies])}), 200
    except LookupError as e:
        return jsonify({"error_code": "TOPIC_NOT_FOUND", "message": str(e)}), 404
    except Exception as e:
        logging.error(f"답글 목록 조회 중 오류 발생 (topic_id: {topic_id}): {e}", exc_info=True)
        return jsonify({"error_code": "FETCH_FAILED", "message": "답글 목록 조회 중 오류가 발생했습니다."}), 500
