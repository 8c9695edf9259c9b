# pawcircle/api/auth/services.py
import uuid
import logging
from datetime import datetime, timezone
from typing import Dict, Any
from dataclasses import asdict
from firebase_admin import firestore
from werkzeug.security import generate_password_hash, check_password_hash

from pawcircle.models.user import User
from pawcircle.utils.datetime_utils import DateTimeUtils

class UserAlreadyExistsError(ValueError):
    """user_name, email, phone_no 중 하나가 이미 사용 중일 때 발생합니다."""
    def __init__(self, field_name: str):
        super().__init__(f"'{field_name}' 값이 이미 사용 중입니다.")
        self.field_name = field_name

class InvalidCredentialsError(Exception):
    pass

class AuthService:
    """회원가입, 로그인, 토큰 무효화(Blocklist)를 담당하는 서비스."""
    UNIQUE_FIELDS = ('user_name', 'email', 'phone_no')

    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')
        self.revoked_tokens_ref = self.db.collection('revoked_tokens')

    def register_user(self, user_data: Dict[str, Any]) -> User:
        """[트랜잭션] 유일성 검사 후 신규 사용자를 생성합니다."""
        user_id = str(uuid.uuid4())
        user_ref = self.users_ref.document(user_id)
        candidate = dict(user_data)
        candidate['email'] = candidate['email'].strip().lower()

        transaction = self.db.transaction()

        @firestore.transactional
        def _register_in_transaction(transaction):
            for field_name in self.UNIQUE_FIELDS:
                existing = self.users_ref.where(field_name, '==', candidate[field_name]).limit(1).get(transaction=transaction)
                if existing:
                    raise UserAlreadyExistsError(field_name)

            new_user = User(
                user_id=user_id,
                user_name=candidate['user_name'],
                name=candidate['name'],
                email=candidate['email'],
                phone_no=candidate['phone_no'],
                password_hash=generate_password_hash(candidate['password'])
            )
            transaction.set(user_ref, DateTimeUtils.for_firestore(asdict(new_user)))
            return new_user

        new_user = _register_in_transaction(transaction)
        logging.info(f"New user registered: {new_user.user_id} ({new_user.user_name})")
        return new_user

    def authenticate(self, email: str, password: str) -> User:
        """이메일/비밀번호를 검증하고 User를 반환합니다."""
        query = self.users_ref.where('email', '==', email.strip().lower()).limit(1).stream()
        user_doc = next(query, None)
        if not user_doc:
            raise FileNotFoundError("사용자를 찾을 수 없습니다.")

        user = User.from_dict(user_doc.to_dict())
        if not check_password_hash(user.password_hash, password):
            logging.warning(f"로그인 실패: 비밀번호 불일치 (user_id: {user.user_id})")
            raise InvalidCredentialsError("비밀번호가 올바르지 않습니다.")
        return user

    # --- Blocklist 관련 로직 ---
    def add_token_to_blocklist(self, jti: str, expires: datetime):
        """토큰의 jti를 만료 시간과 함께 저장합니다."""
        token_data = {
            'revoked_at': DateTimeUtils.now(),
            'expires_at': expires
        }
        self.revoked_tokens_ref.document(jti).set(DateTimeUtils.for_firestore(token_data))

    def is_token_revoked(self, jwt_payload: dict) -> bool:
        """jti를 이용해 해당 토큰이 무효화 목록에 있는지 확인합니다."""
        jti = jwt_payload['jti']
        doc = self.revoked_tokens_ref.document(jti).get()
        return doc.exists

    def logout_user(self, *token_payloads: dict):
        """전달받은 토큰들(access/refresh)을 모두 Blocklist에 추가합니다."""
        for payload in token_payloads:
            expires = datetime.fromtimestamp(payload['exp'], tz=timezone.utc)
            self.add_token_to_blocklist(payload['jti'], expires)
        logging.info(f"사용자 로그아웃 처리 완료. JTI: {', '.join(p['jti'][:8] for p in token_payloads)}")
