# pawcircle/models/user.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Dict, Any

from pawcircle.utils.datetime_utils import DateTimeUtils

@dataclass
class User:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    user_name, email, phone_no는 서비스 계층에서 유일성을 보장합니다.
    """
    user_id: str
    user_name: str
    name: str
    email: str
    phone_no: str
    password_hash: str
    pet_ids: List[str] = field(default_factory=list)
    join_date: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        processed_data = DateTimeUtils.from_firestore(data)
        if processed_data.get('pet_ids') is None:
            processed_data['pet_ids'] = []
        return cls(**processed_data)

    def public_dict(self) -> Dict[str, Any]:
        """비밀번호 해시를 제외한 정보만 반환합니다."""
        return {
            'user_id': self.user_id,
            'user_name': self.user_name,
            'name': self.name,
            'email': self.email,
            'phone_no': self.phone_no,
            'pet_ids': list(self.pet_ids),
            'join_date': self.join_date,
        }
