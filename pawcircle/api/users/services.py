# pawcircle/api/users/services.py
import logging
from typing import Dict, Any, Optional
from firebase_admin import firestore

from pawcircle.models.user import User

class UserService:
    """사용자 프로필 조회 서비스."""
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')

    def get_user(self, user_id: str) -> Optional[User]:
        doc = self.users_ref.document(user_id).get()
        return User.from_dict(doc.to_dict()) if doc.exists else None

    def get_user_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        """다른 사용자에게 보여줄 공개 프로필 (연락처 제외, 반려동물 수 포함)."""
        user = self.get_user(user_id)
        if not user:
            return None
        return {
            'user_id': user.user_id,
            'user_name': user.user_name,
            'name': user.name,
            'pet_count': len(user.pet_ids),
            'join_date': user.join_date,
        }

    def get_my_profile(self, user_id: str) -> Optional[Dict[str, Any]]:
        user = self.get_user(user_id)
        if not user:
            logging.warning(f"Profile requested for missing user {user_id}")
            return None
        return user.public_dict()
