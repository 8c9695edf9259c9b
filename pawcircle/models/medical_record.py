# pawcircle/models/medical_record.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Dict, Any

from pawcircle.utils.datetime_utils import DateTimeUtils

@dataclass
class MedicalRecord:
    """
    Firestore 'medical_records' 컬렉션 문서 구조.
    pet_id로 소속 반려동물을 직접 참조하며, Pet.medical_record_ids와 함께 기록됩니다.
    """
    record_id: str
    pet_id: str
    pic_url: str
    description: Optional[str] = None
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MedicalRecord":
        return cls(**DateTimeUtils.from_firestore(data))
