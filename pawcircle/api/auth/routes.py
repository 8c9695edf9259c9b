# pawcircle/api/auth/routes.py

import logging
from flask import Blueprint, request, jsonify, current_app
from flask_jwt_extended import (
    create_access_token,
    create_refresh_token,
    jwt_required,
    get_jwt_identity,
    get_jwt,
    decode_token
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt import PyJWTError
from marshmallow import ValidationError

from .schemas import RegisterSchema, LoginSchema, LogoutRequestSchema, UserInfoSchema
from .services import UserAlreadyExistsError, InvalidCredentialsError

auth_bp = Blueprint('auth_bp', __name__)

@auth_bp.route('/register', methods=['POST'])
def register():
    """이메일/비밀번호 회원가입."""
    auth_service = current_app.services['auth']
    try:
        validated_data = RegisterSchema().load(request.get_json(silent=True) or {})
        new_user = auth_service.register_user(validated_data)
        return jsonify({
            "message": "회원가입이 완료되었습니다.",
            "user": UserInfoSchema().dump(new_user.public_dict())
        }), 201
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except UserAlreadyExistsError as e:
        return jsonify({"error_code": "USER_ALREADY_EXISTS", "field": e.field_name, "message": str(e)}), 400
    except Exception as e:
        logging.error(f"회원가입 중 예외 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "회원가입 처리 중 서버 오류가 발생했습니다."}), 500


@auth_bp.route('/login', methods=['POST'])
def login():
    """로그인 후 Access/Refresh 토큰을 발급합니다."""
    auth_service = current_app.services['auth']
    try:
        data = LoginSchema().load(request.get_json(silent=True) or {})
        user = auth_service.authenticate(data['email'], data['password'])

        identity = user.user_id
        return jsonify({
            "access_token": create_access_token(identity=identity),
            "refresh_token": create_refresh_token(identity=identity),
            "user": UserInfoSchema().dump(user.public_dict())
        }), 200
    except ValidationError as err:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": err.messages}), 400
    except FileNotFoundError as e:
        return jsonify({"error_code": "USER_NOT_FOUND", "message": str(e)}), 404
    except InvalidCredentialsError as e:
        return jsonify({"error_code": "INVALID_CREDENTIALS", "message": str(e)}), 401
    except Exception as e:
        logging.error(f"로그인 중 예외 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부 오류가 발생했습니다."}), 500


# --- 토큰 재발급 엔드포인트 ---
@auth_bp.route('/token/refresh', methods=['POST'])
@jwt_required(refresh=True)
def refresh_token():
    """유효한 Refresh Token으로 새로운 Access Token을 발급합니다."""
    current_user_id = get_jwt_identity()
    new_access_token = create_access_token(identity=current_user_id)
    return jsonify(access_token=new_access_token), 200


# --- 로그아웃 엔드포인트 ---
@auth_bp.route('/logout', methods=['POST'])
@jwt_required()
def logout():
    """현재 Access Token과 (전달된 경우) Refresh Token을 무효화 목록에 추가합니다."""
    auth_service = current_app.services['auth']
    try:
        data = LogoutRequestSchema().load(request.get_json(silent=True) or {})
        payloads = [get_jwt()]
        if data.get('refresh_token'):
            refresh_payload = decode_token(data['refresh_token'], allow_expired=True)
            if refresh_payload.get('sub') != get_jwt_identity():
                return jsonify({"error_code": "INVALID_TOKEN", "message": "다른 사용자의 토큰입니다."}), 422
            payloads.append(refresh_payload)

        auth_service.logout_user(*payloads)
        return jsonify({"message": "로그아웃 되었습니다."}), 200
    except ValidationError as e:
        return jsonify({"error_code": "VALIDATION_ERROR", "details": e.messages}), 400
    except (PyJWTError, JWTExtendedException) as e:
        logging.error(f"JWT 해독 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "INVALID_TOKEN", "message": "유효하지 않은 토큰입니다."}), 422
    except Exception as e:
        logging.error(f"로그아웃 처리 중 오류 발생: {e}", exc_info=True)
        return jsonify({"error_code": "LOGOUT_FAILED", "message": "로그아웃 처리 중 오류가 발생했습니다."}), 500
