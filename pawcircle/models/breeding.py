# pawcircle/models/breeding.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Dict, Any

from pawcircle.utils.datetime_utils import DateTimeUtils

class BreedingStatus(Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

class BreedingDecision(Enum):
    """매칭 요청에 대한 수신자의 결정. API 요청 본문의 status 값과 동일합니다."""
    ACCEPT = "Accept"
    REJECT = "Reject"

@dataclass
class BreedingRequest:
    """
    Firestore 'breeding_requests' 컬렉션 문서 구조.
    approved 상태로는 저장되지 않습니다. 수락 시 같은 트랜잭션에서 삭제되고 Match가 생성됩니다.
    """
    request_id: str
    requester_pet_id: str
    requested_pet_id: str
    requester_user_id: str
    requested_user_id: str
    status: BreedingStatus = BreedingStatus.PENDING
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BreedingRequest":
        processed_data = DateTimeUtils.from_firestore(data)
        processed_data['status'] = BreedingStatus(processed_data.get('status'))
        return cls(**processed_data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['status'] = self.status.value
        return data

@dataclass
class Match:
    """
    Firestore 'matches' 컬렉션 문서 구조.
    match_id는 원본 매칭 요청의 request_id와 같습니다.
    """
    match_id: str
    pet1_id: str
    pet2_id: str
    user_of_pet1_id: str
    user_of_pet2_id: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        return cls(**DateTimeUtils.from_firestore(data))
