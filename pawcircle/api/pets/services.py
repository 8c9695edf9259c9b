# pawcircle/api/pets/services.py
import logging
import uuid
from typing import Dict, Any, List
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

from pawcircle.models.pet import Pet, PetType, PetGender
from pawcircle.utils.datetime_utils import DateTimeUtils

class PetService:
    """반려동물 등록/조회/수정/삭제 및 교배 가능 여부 관리를 전담하는 서비스."""
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.pets_ref = self.db.collection('pets')
        self.users_ref = self.db.collection('users')
        self.medical_records_ref = self.db.collection('medical_records')
        self.breeding_requests_ref = self.db.collection('breeding_requests')
        self.matches_ref = self.db.collection('matches')
        logging.info("PetService initialized.")

    def get_pet(self, pet_id: str) -> Pet:
        """소유권 검사 없이 반려동물을 조회합니다."""
        doc = self.pets_ref.document(pet_id).get()
        if not doc.exists:
            raise FileNotFoundError("해당 ID의 반려동물을 찾을 수 없습니다.")
        return Pet.from_dict(doc.to_dict())

    def get_pets_for_user(self, user_id: str) -> List[Pet]:
        """사용자가 소유한 반려동물 목록을 반환합니다. 사용자가 없으면 FileNotFoundError."""
        if not self.users_ref.document(user_id).get().exists:
            raise FileNotFoundError("사용자를 찾을 수 없습니다.")
        docs = self.pets_ref.where('user_id', '==', user_id).stream()
        return sorted((Pet.from_dict(doc.to_dict()) for doc in docs), key=lambda p: p.created_at)

    def register_pet(self, user_id: str, pet_data: Dict[str, Any]) -> Pet:
        """[트랜잭션] 반려동물 문서 생성과 소유자 pet_ids 갱신을 원자적으로 처리합니다."""
        transaction = self.db.transaction()
        pet_id = str(uuid.uuid4())
        pet_ref = self.pets_ref.document(pet_id)
        user_ref = self.users_ref.document(user_id)

        @firestore.transactional
        def _register_in_transaction(transaction: Transaction):
            if not user_ref.get(transaction=transaction).exists:
                raise FileNotFoundError("사용자를 찾을 수 없습니다.")

            new_pet = Pet(
                pet_id=pet_id, user_id=user_id,
                name=pet_data['name'], pet_type=PetType(pet_data['pet_type']),
                breed=pet_data['breed'], age=pet_data['age'],
                weight=pet_data['weight'], gender=PetGender(pet_data['gender']),
                pic_url=pet_data.get('pic_url'),
                available_for_breeding=pet_data.get('available_for_breeding', False)
            )
            transaction.set(pet_ref, DateTimeUtils.for_firestore(new_pet.to_dict()))
            transaction.update(user_ref, {'pet_ids': firestore.ArrayUnion([pet_id])})
            return new_pet

        try:
            new_pet = _register_in_transaction(transaction)
        except FileNotFoundError:
            raise
        except Exception as e:
            logging.error(f"Pet registration transaction failed for user {user_id}: {e}", exc_info=True)
            raise RuntimeError("반려동물 등록에 실패했습니다. 다시 시도해주세요.")

        logging.info(f"Pet {pet_id} registered for user {user_id}")
        return new_pet

    def update_pet(self, pet_id: str, user_id: str, update_data: Dict[str, Any]) -> Pet:
        """반려동물 정보를 부분 업데이트합니다."""
        pet_ref = self.pets_ref.document(pet_id)
        doc = pet_ref.get()
        if not doc.exists:
            raise FileNotFoundError("해당 ID의 반려동물을 찾을 수 없습니다.")
        if doc.to_dict().get('user_id') != user_id:
            raise PermissionError("반려동물 정보를 수정할 권한이 없습니다.")
        if not update_data:
            raise ValueError("수정할 데이터가 제공되지 않았습니다.")

        pet_ref.update(DateTimeUtils.for_firestore(DateTimeUtils.touch(update_data)))
        logging.info(f"Pet {pet_id} updated with fields: {list(update_data.keys())}")
        return Pet.from_dict(pet_ref.get().to_dict())

    def set_breeding_availability(self, pet_id: str, user_id: str, available: bool) -> Pet:
        """교배 후보 목록 노출 여부(available_for_breeding)를 변경합니다."""
        return self.update_pet(pet_id, user_id, {'available_for_breeding': bool(available)})

    def delete_pet(self, pet_id: str, user_id: str) -> Dict[str, int]:
        """
        [트랜잭션] 반려동물과 그에 딸린 의료 기록, 매칭 요청, 매칭 결과를 함께 삭제합니다.
        소유자의 pet_ids 배열에서도 함께 제거합니다.
        """
        pet_ref = self.pets_ref.document(pet_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _delete_in_transaction(transaction: Transaction):
            doc = pet_ref.get(transaction=transaction)
            if not doc.exists:
                raise FileNotFoundError("해당 ID의 반려동물을 찾을 수 없습니다.")
            if doc.to_dict().get('user_id') != user_id:
                raise PermissionError("반려동물을 삭제할 권한이 없습니다.")
            owner_ref = self.users_ref.document(user_id)
            owner_exists = owner_ref.get(transaction=transaction).exists

            dependent_refs = {
                'medical_records': [
                    d.reference for d in self.medical_records_ref.where('pet_id', '==', pet_id).get(transaction=transaction)
                ],
                'breeding_requests': [
                    d.reference
                    for field_name in ('requester_pet_id', 'requested_pet_id')
                    for d in self.breeding_requests_ref.where(field_name, '==', pet_id).get(transaction=transaction)
                ],
                'matches': [
                    d.reference
                    for field_name in ('pet1_id', 'pet2_id')
                    for d in self.matches_ref.where(field_name, '==', pet_id).get(transaction=transaction)
                ],
            }

            for refs in dependent_refs.values():
                for ref in refs:
                    transaction.delete(ref)
            transaction.delete(pet_ref)
            if owner_exists:
                transaction.update(owner_ref, {'pet_ids': firestore.ArrayRemove([pet_id])})
            return {name: len(refs) for name, refs in dependent_refs.items()}

        deleted_counts = _delete_in_transaction(transaction)
        logging.info(f"Pet {pet_id} deleted with dependents: {deleted_counts}")
        return deleted_counts
