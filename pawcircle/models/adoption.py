# pawcircle/models/adoption.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from enum import Enum
from typing import Optional, Dict, Any

from pawcircle.utils.datetime_utils import DateTimeUtils

class HelpType(Enum):
    RESCUE = "Rescue"
    ADOPT = "Adopt"

class AdoptionStatus(Enum):
    PENDING = 'pending'
    APPROVED = "approved"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"

@dataclass
class RescueListing:
    """Firestore 'rescue_listings' 컬렉션 문서 구조 (구조/입양 게시글)."""
    listing_id: str
    type_of_help: HelpType
    description: str
    pic_url: str
    created_by: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RescueListing":
        processed_data = DateTimeUtils.from_firestore(data)
        processed_data['type_of_help'] = HelpType(processed_data.get('type_of_help'))
        return cls(**processed_data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['type_of_help'] = self.type_of_help.value
        return data

@dataclass
class AdoptionRequest:
    """Firestore 'adoption_requests' 컬렉션 문서 구조 (입양 신청서)."""
    request_id: str
    listing_id: str
    user_id: str
    applicant_name: str
    applicant_email: str
    applicant_phone: str
    message: str = ''
    experience_with_pets: str = ''
    living_arrangement: str = ''
    reason_for_adoption: str = ''
    status: AdoptionStatus = AdoptionStatus.PENDING
    reviewed_at: Optional[datetime] = None
    reviewed_by: Optional[str] = None
    review_comments: str = ''
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdoptionRequest":
        processed_data = DateTimeUtils.from_firestore(data)
        processed_data['status'] = AdoptionStatus(processed_data.get('status', 'pending'))
        return cls(**processed_data)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['status'] = self.status.value
        return data
