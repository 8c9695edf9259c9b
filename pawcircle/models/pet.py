# pawcircle/models/pet.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any
from enum import Enum
import logging

from pawcircle.utils.datetime_utils import DateTimeUtils

class PetType(Enum):
    DOG = "Dog"
    CAT = "Cat"
    BIRD = "Bird"
    FISH = "Fish"
    REPTILE = "Reptile"
    RODENT = "Rodent"
    OTHER = "Other"

class PetGender(Enum):
    MALE = "Male"
    FEMALE = "Female"

@dataclass
class Pet:
    """
    Firestore 'pets' 컬렉션 문서 구조.
    소유자는 user_id로 역참조하며, 소유자 문서의 pet_ids 배열과 항상 함께 기록됩니다.
    """
    pet_id: str
    user_id: str
    name: str
    pet_type: PetType
    breed: str
    age: int
    weight: float
    gender: PetGender
    pic_url: Optional[str] = None
    available_for_breeding: bool = False
    medical_record_ids: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Pet":
        """
        Firestore에서 받은 딕셔너리로부터 Pet 인스턴스를 생성합니다.
        문자열로 저장된 Enum 값을 변환하고, 알 수 없는 값은 OTHER로 처리합니다.
        """
        processed_data = DateTimeUtils.from_firestore(data)

        type_str = processed_data.get('pet_type')
        try:
            processed_data['pet_type'] = PetType(type_str)
        except ValueError:
            logging.warning(f"Invalid PetType value '{type_str}' for pet {processed_data.get('pet_id')}. Defaulting to Other.")
            processed_data['pet_type'] = PetType.OTHER

        processed_data['gender'] = PetGender(processed_data.get('gender'))

        if processed_data.get('medical_record_ids') is None:
            processed_data['medical_record_ids'] = []
        return cls(**processed_data)

    def to_dict(self) -> Dict[str, Any]:
        """Firestore 저장 및 응답 직렬화에 쓰이는 딕셔너리로 변환합니다."""
        return {
            'pet_id': self.pet_id,
            'user_id': self.user_id,
            'name': self.name,
            'pet_type': self.pet_type.value,
            'breed': self.breed,
            'age': self.age,
            'weight': self.weight,
            'gender': self.gender.value,
            'pic_url': self.pic_url,
            'available_for_breeding': self.available_for_breeding,
            'medical_record_ids': list(self.medical_record_ids),
            'created_at': self.created_at,
            'updated_at': self.updated_at,
        }
