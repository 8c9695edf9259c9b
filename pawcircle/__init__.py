# pawcircle/__init__.py

# =====================================================================================
# 1. 환경 변수 로드 (가장 먼저 실행)
# =====================================================================================
from dotenv import load_dotenv
load_dotenv()

# =====================================================================================
# 2. 모듈 임포트 (Module Imports)
# =====================================================================================
import os
import logging
from flask import Flask, jsonify
from marshmallow import ValidationError
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
import firebase_admin
from firebase_admin import credentials, firestore

# - 설정
from pawcircle.core.config import config_by_name

# - API 블루프린트
from pawcircle.api.auth.routes import auth_bp
from pawcircle.api.users.routes import users_bp
from pawcircle.api.pets.routes import pets_bp
from pawcircle.api.medical.routes import medical_bp
from pawcircle.api.petmate.routes import petmate_bp
from pawcircle.api.adoption.routes import adoption_bp
from pawcircle.api.forum.routes import forum_bp
from pawcircle.api.health.routes import health_bp

# - 서비스 모듈
from pawcircle.services.notification_service import NotificationService
from pawcircle.api.auth.services import AuthService
from pawcircle.api.users.services import UserService
from pawcircle.api.pets.services import PetService
from pawcircle.api.medical.services import MedicalRecordService
from pawcircle.api.petmate.services import PetMateService
from pawcircle.api.adoption.services import AdoptionService
from pawcircle.api.forum.services import ForumService

def _init_firebase(app: Flask):
    """서비스 계정 파일이 있으면 그것으로, 없으면 프로젝트 ID(에뮬레이터)로 firebase_admin을 초기화합니다."""
    if firebase_admin._apps:
        return
    cred_path = app.config.get('FIREBASE_CREDENTIALS_PATH')
    if cred_path:
        if not os.path.exists(cred_path):
            raise FileNotFoundError(f"Firebase 인증 파일을 찾을 수 없습니다: {cred_path}")
        firebase_admin.initialize_app(credentials.Certificate(cred_path))
    elif app.config.get('FIRESTORE_EMULATOR_HOST') or app.config.get('FIREBASE_PROJECT_ID'):
        firebase_admin.initialize_app(options={'projectId': app.config.get('FIREBASE_PROJECT_ID')})
    else:
        raise ValueError("FIREBASE_CREDENTIALS_PATH 또는 FIREBASE_PROJECT_ID 환경 변수가 필요합니다.")

def create_app(config_name=None, db=None):
    """
    Flask 애플리케이션 팩토리 함수.
    db를 주입하면 firebase_admin 초기화를 건너뛰고 해당 클라이언트를 모든 서비스에 사용합니다.
    """
    # =====================================================================================
    # 3. Flask 앱 생성 및 기본 설정
    # =====================================================================================
    config_name = config_name or os.getenv('FLASK_ENV', 'development')

    app = Flask(__name__)
    app.config.from_object(config_by_name[config_name])
    app.json.ensure_ascii = False

    if not app.config.get('JWT_SECRET_KEY'):
        raise ValueError("JWT_SECRET_KEY 환경 변수가 설정되지 않았습니다.")

    # =====================================================================================
    # 4. 확장 기능 및 외부 서비스 초기화
    # =====================================================================================
    jwt = JWTManager(app)

    if db is None:
        _init_firebase(app)
        db = firestore.client()

    # =====================================================================================
    # 5. 서비스 인스턴스 생성 및 'app.services'에 저장 (의존성 주입)
    # =====================================================================================
    app.services = {'db': db}

    # 5-1. 다른 서비스의 기반이 되는 공용 서비스
    app.services['notifications'] = NotificationService(db=db)

    # 5-2. 도메인 서비스
    app.services['auth'] = AuthService(db=db)
    app.services['users'] = UserService(db=db)
    app.services['pets'] = PetService(db=db)
    app.services['medical'] = MedicalRecordService(db=db)
    app.services['petmate'] = PetMateService(notification_service=app.services['notifications'], db=db)
    app.services['adoption'] = AdoptionService(notification_service=app.services['notifications'], db=db)
    app.services['forum'] = ForumService(notification_service=app.services['notifications'], db=db)

    # - 로그아웃된 토큰 거부
    @jwt.token_in_blocklist_loader
    def check_if_token_revoked(jwt_header, jwt_payload: dict) -> bool:
        return app.services['auth'].is_token_revoked(jwt_payload)

    # =====================================================================================
    # 6. 블루프린트 등록
    # =====================================================================================
    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(users_bp, url_prefix='/api/users')
    app.register_blueprint(pets_bp, url_prefix='/api/pets')
    app.register_blueprint(medical_bp, url_prefix='/api/medical')
    app.register_blueprint(petmate_bp, url_prefix='/api/petmate')
    app.register_blueprint(adoption_bp, url_prefix='/api/adoption')
    app.register_blueprint(forum_bp, url_prefix='/api/community')
    app.register_blueprint(health_bp, url_prefix='/api/health')

    # =====================================================================================
    # 7. 전역 에러 핸들러 설정
    # =====================================================================================
    @app.errorhandler(ValidationError)
    def handle_marshmallow_validation(err):
        response = {"error_code": "VALIDATION_ERROR", "details": err.messages}
        return jsonify(response), 400

    @app.errorhandler(Exception)
    def handle_generic_exception(err):
        # 404, 405 같은 HTTP 예외는 원래 응답을 유지
        if isinstance(err, HTTPException):
            return err
        logging.error(f"An unhandled exception occurred: {err}", exc_info=True)
        response = {"error_code": "INTERNAL_SERVER_ERROR", "message": "서버 내부에서 예상치 못한 오류가 발생했습니다."}
        return jsonify(response), 500

    # =====================================================================================
    # 8. 로깅 및 앱 반환
    # =====================================================================================
    if not app.debug:
        logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]')

    logging.info(f"Flask app created for '{config_name}' environment.")

    return app
