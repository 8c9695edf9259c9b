# pawcircle/api/medical/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Dict, Any, List
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

from pawcircle.models.medical_record import MedicalRecord
from pawcircle.utils.datetime_utils import DateTimeUtils

class MedicalRecordService:
    """반려동물 의료 기록 관리 서비스. 기록 문서와 Pet.medical_record_ids를 함께 갱신합니다."""
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.pets_ref = self.db.collection('pets')
        self.records_ref = self.db.collection('medical_records')
        logging.info("MedicalRecordService initialized.")

    def _check_owner(self, pet_snapshot, user_id: str):
        if not pet_snapshot.exists:
            raise FileNotFoundError("해당 ID의 반려동물을 찾을 수 없습니다.")
        if pet_snapshot.to_dict().get('user_id') != user_id:
            raise PermissionError("이 반려동물의 의료 기록에 접근할 권한이 없습니다.")

    def add_record(self, pet_id: str, user_id: str, data: Dict[str, Any]) -> MedicalRecord:
        """[트랜잭션] 의료 기록을 생성하고 반려동물의 medical_record_ids에 추가합니다."""
        pet_ref = self.pets_ref.document(pet_id)
        record_id = str(uuid.uuid4())
        record_ref = self.records_ref.document(record_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _add_in_transaction(transaction: Transaction):
            self._check_owner(pet_ref.get(transaction=transaction), user_id)
            record = MedicalRecord(
                record_id=record_id,
                pet_id=pet_id,
                pic_url=data['pic_url'],
                description=data.get('description')
            )
            transaction.set(record_ref, DateTimeUtils.for_firestore(asdict(record)))
            transaction.update(pet_ref, {
                'medical_record_ids': firestore.ArrayUnion([record_id]),
                'updated_at': DateTimeUtils.now()
            })
            return record

        record = _add_in_transaction(transaction)
        logging.info(f"Medical record {record_id} added to pet {pet_id}")
        return record

    def list_records(self, pet_id: str, user_id: str) -> List[MedicalRecord]:
        """반려동물의 의료 기록 목록 (최신순)."""
        self._check_owner(self.pets_ref.document(pet_id).get(), user_id)
        docs = self.records_ref.where('pet_id', '==', pet_id).stream()
        records = [MedicalRecord.from_dict(doc.to_dict()) for doc in docs]
        return sorted(records, key=lambda r: r.created_at, reverse=True)

    def delete_record(self, record_id: str, user_id: str) -> None:
        """[트랜잭션] 의료 기록을 삭제하고 반려동물의 배열에서도 제거합니다."""
        record_ref = self.records_ref.document(record_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _delete_in_transaction(transaction: Transaction):
            record_doc = record_ref.get(transaction=transaction)
            if not record_doc.exists:
                raise LookupError("의료 기록을 찾을 수 없습니다.")
            pet_id = record_doc.to_dict().get('pet_id')
            pet_ref = self.pets_ref.document(pet_id)
            self._check_owner(pet_ref.get(transaction=transaction), user_id)

            transaction.delete(record_ref)
            transaction.update(pet_ref, {'medical_record_ids': firestore.ArrayRemove([record_id])})
            return pet_id

        pet_id = _delete_in_transaction(transaction)
        logging.info(f"Medical record {record_id} deleted from pet {pet_id}")
