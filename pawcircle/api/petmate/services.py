# pawcircle/api/petmate/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Dict, Any, Optional, List
from firebase_admin import firestore
from firebase_admin.firestore import Transaction
from google.api_core.exceptions import Conflict

from pawcircle.models.pet import Pet
from pawcircle.models.user import User
from pawcircle.models.breeding import BreedingRequest, BreedingStatus, BreedingDecision, Match
from pawcircle.models.notification import NotificationType
from pawcircle.services.notification_service import NotificationService
from pawcircle.utils.datetime_utils import DateTimeUtils
from .exceptions import (
    PetNotFoundError, UserNotFoundError, RequestNotFoundError, OwnerNotFoundError,
    ForbiddenError, InvalidBreedingPairError, PetNotAvailableError,
    DuplicateRequestError, AlreadyMatchedError, RequestAlreadyResolvedError
)

# Firestore 'in' 쿼리의 값 개수 제한
IN_QUERY_CHUNK_SIZE = 30

class PetMateService:
    """
    교배 매칭 흐름(후보 조회 -> 요청 -> 수락/거절 -> 매칭 생성)을 담당하는 서비스.

    상태 전이:
      pending --Accept--> (Match 생성, 요청 삭제)
      pending --Reject--> rejected (요청 보존, 종료 상태)
      pending --Withdraw--> (요청 삭제, 요청자만 가능)

    상태를 바꾸는 모든 작업은 하나의 Firestore 트랜잭션 안에서 읽기-검증-쓰기를 수행합니다.
    """
    def __init__(self, notification_service: NotificationService, db=None):
        self.db = db or firestore.client()
        self.pets_ref = self.db.collection('pets')
        self.users_ref = self.db.collection('users')
        self.requests_ref = self.db.collection('breeding_requests')
        self.matches_ref = self.db.collection('matches')
        self.notification_service = notification_service
        logging.info("PetMateService initialized.")

    # ------------------------------------------------------------------
    # 내부 조회 헬퍼
    # ------------------------------------------------------------------
    def _get_user(self, user_id: str) -> User:
        doc = self.users_ref.document(user_id).get()
        if not doc.exists:
            raise UserNotFoundError("사용자를 찾을 수 없습니다.")
        return User.from_dict(doc.to_dict())

    def _get_pet(self, pet_id: str, transaction: Optional[Transaction] = None) -> Pet:
        doc = self.pets_ref.document(pet_id).get(transaction=transaction)
        if not doc.exists:
            raise PetNotFoundError(f"반려동물을 찾을 수 없습니다: {pet_id}")
        return Pet.from_dict(doc.to_dict())

    def _find_owner_id(self, pet_id: str, transaction: Optional[Transaction] = None) -> Optional[str]:
        """
        반려동물의 user_id로 소유자를 찾고, 그 사용자의 pet_ids에 pet_id가 있는지 확인합니다.
        반려동물이나 사용자가 없거나 두 정보가 어긋나면 None을 반환합니다.
        """
        pet_doc = self.pets_ref.document(pet_id).get(transaction=transaction)
        if not pet_doc.exists:
            return None
        owner_id = pet_doc.get('user_id')
        if not owner_id:
            return None
        user_doc = self.users_ref.document(owner_id).get(transaction=transaction)
        if not user_doc.exists or pet_id not in (user_doc.get('pet_ids') or []):
            return None
        return owner_id

    def _pet_dicts(self, pet_ids) -> Dict[str, Optional[Dict[str, Any]]]:
        """요청/매칭 응답에 채워 넣을 반려동물 문서를 한 번씩만 조회합니다."""
        pets = {}
        for pet_id in set(pet_ids):
            doc = self.pets_ref.document(pet_id).get()
            pets[pet_id] = Pet.from_dict(doc.to_dict()).to_dict() if doc.exists else None
        return pets

    def _query_in_chunks(self, collection_ref, field_name: str, values: List[str]):
        for i in range(0, len(values), IN_QUERY_CHUNK_SIZE):
            chunk = values[i:i + IN_QUERY_CHUNK_SIZE]
            yield from collection_ref.where(field_name, 'in', chunk).stream()

    # ------------------------------------------------------------------
    # 후보 조회
    # ------------------------------------------------------------------
    def list_candidates(self, user_id: str) -> List[Pet]:
        """
        교배 가능(available_for_breeding)이면서 user_id 소유가 아닌 반려동물 목록.
        결과가 없으면 빈 리스트를 반환합니다.
        """
        user = self._get_user(user_id)
        own_pet_ids = set(user.pet_ids)

        docs = self.pets_ref.where('available_for_breeding', '==', True).stream()
        candidates = []
        for doc in docs:
            pet = Pet.from_dict(doc.to_dict())
            if pet.user_id == user_id or pet.pet_id in own_pet_ids:
                continue
            candidates.append(pet)
        return sorted(candidates, key=lambda p: p.created_at)

    # ------------------------------------------------------------------
    # 매칭 요청 생성
    # ------------------------------------------------------------------
    def request_breeding(self, user_id: str, requester_pet_id: str, requested_pet_id: str) -> BreedingRequest:
        """
        [트랜잭션] pending 상태의 매칭 요청을 생성합니다.
        두 반려동물의 존재, 요청자 소유권, 서로 다른 소유자, 교배 가능 여부,
        동일 쌍의 중복 요청/기존 매칭 여부를 모두 같은 트랜잭션 안에서 확인합니다.
        """
        if requester_pet_id == requested_pet_id:
            raise InvalidBreedingPairError("같은 반려동물끼리는 매칭을 요청할 수 없습니다.")

        request_id = str(uuid.uuid4())
        request_ref = self.requests_ref.document(request_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _request_in_transaction(transaction: Transaction):
            requester_pet = self._get_pet(requester_pet_id, transaction)
            requested_pet = self._get_pet(requested_pet_id, transaction)

            pending_between = []
            existing_matches = []
            for first, second in ((requester_pet_id, requested_pet_id), (requested_pet_id, requester_pet_id)):
                pending_between += (
                    self.requests_ref
                    .where('requester_pet_id', '==', first)
                    .where('requested_pet_id', '==', second)
                    .where('status', '==', BreedingStatus.PENDING.value)
                    .limit(1)
                    .get(transaction=transaction)
                )
                existing_matches += (
                    self.matches_ref
                    .where('pet1_id', '==', first)
                    .where('pet2_id', '==', second)
                    .limit(1)
                    .get(transaction=transaction)
                )

            if requester_pet.user_id != user_id:
                raise ForbiddenError("본인 소유의 반려동물로만 매칭을 요청할 수 있습니다.")
            if requester_pet.user_id == requested_pet.user_id:
                raise InvalidBreedingPairError("같은 소유자의 반려동물끼리는 매칭을 요청할 수 없습니다.")
            if not requested_pet.available_for_breeding:
                raise PetNotAvailableError("상대 반려동물이 현재 교배 매칭을 받지 않습니다.")
            if existing_matches:
                raise AlreadyMatchedError("이미 매칭된 반려동물 쌍입니다.")
            if pending_between:
                raise DuplicateRequestError("두 반려동물 사이에 이미 대기 중인 요청이 있습니다.")

            new_request = BreedingRequest(
                request_id=request_id,
                requester_pet_id=requester_pet_id,
                requested_pet_id=requested_pet_id,
                requester_user_id=requester_pet.user_id,
                requested_user_id=requested_pet.user_id
            )
            transaction.set(request_ref, DateTimeUtils.for_firestore(asdict(new_request)))
            return new_request

        new_request = _request_in_transaction(transaction)
        logging.info(f"Breeding request {request_id} created: {requester_pet_id} -> {requested_pet_id}")

        self.notification_service.create_notification(
            recipient_id=new_request.requested_user_id,
            sender_id=user_id,
            n_type=NotificationType.BREEDING_REQUEST,
            target_id=request_id
        )
        return new_request

    # ------------------------------------------------------------------
    # 수락 / 거절
    # ------------------------------------------------------------------
    def resolve_request(self, user_id: str, request_id: str, decision: BreedingDecision) -> Dict[str, Any]:
        """
        [트랜잭션] 요청을 수락 또는 거절합니다. 요청받은 반려동물의 소유자만 가능합니다.

        수락 시 Match(match_id == request_id)를 create로 생성하고 요청을 삭제합니다.
        두 쓰기는 함께 커밋되거나 함께 롤백되며, create는 같은 ID의 문서가 있으면 실패하므로
        같은 요청으로 Match가 두 번 만들어지지 않습니다.
        """
        request_ref = self.requests_ref.document(request_id)
        match_ref = self.matches_ref.document(request_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _resolve_in_transaction(transaction: Transaction):
            request_doc = request_ref.get(transaction=transaction)
            if not request_doc.exists:
                raise RequestNotFoundError("매칭 요청을 찾을 수 없습니다.")
            breeding_request = BreedingRequest.from_dict(request_doc.to_dict())

            requested_owner_id = self._find_owner_id(breeding_request.requested_pet_id, transaction)
            requester_owner_id = self._find_owner_id(breeding_request.requester_pet_id, transaction)
            existing_match = match_ref.get(transaction=transaction)

            if requested_owner_id is None:
                raise OwnerNotFoundError("요청받은 반려동물의 소유자를 찾을 수 없습니다.")
            if requested_owner_id != user_id:
                raise ForbiddenError("요청받은 반려동물의 소유자만 요청을 처리할 수 있습니다.")
            if breeding_request.status != BreedingStatus.PENDING:
                raise RequestAlreadyResolvedError("이미 처리된 매칭 요청입니다.")

            if decision == BreedingDecision.REJECT:
                update_data = {'status': BreedingStatus.REJECTED.value, 'updated_at': DateTimeUtils.now()}
                transaction.update(request_ref, update_data)
                breeding_request.status = BreedingStatus.REJECTED
                breeding_request.updated_at = update_data['updated_at']
                return breeding_request, None

            if requester_owner_id is None:
                raise OwnerNotFoundError("요청한 반려동물의 소유자를 찾을 수 없습니다.")
            if existing_match.exists:
                raise AlreadyMatchedError("이미 이 요청으로 매칭이 생성되었습니다.")

            match = Match(
                match_id=request_id,
                pet1_id=breeding_request.requester_pet_id,
                pet2_id=breeding_request.requested_pet_id,
                user_of_pet1_id=requester_owner_id,
                user_of_pet2_id=requested_owner_id
            )
            transaction.create(match_ref, DateTimeUtils.for_firestore(asdict(match)))
            transaction.delete(request_ref)
            breeding_request.status = BreedingStatus.APPROVED
            return breeding_request, match

        try:
            breeding_request, match = _resolve_in_transaction(transaction)
        except Conflict:
            # 다른 트랜잭션이 같은 ID의 Match를 먼저 커밋한 경우
            logging.warning(f"Match for request {request_id} was already committed by another transaction.")
            raise AlreadyMatchedError("이미 이 요청으로 매칭이 생성되었습니다.")

        if match is None:
            logging.info(f"Breeding request {request_id} rejected by user {user_id}")
            self.notification_service.create_notification(
                recipient_id=breeding_request.requester_user_id, sender_id=user_id,
                n_type=NotificationType.BREEDING_REJECTED, target_id=request_id
            )
            return {"status": BreedingStatus.REJECTED.value, "breeding_request": breeding_request.to_dict()}

        logging.info(f"Breeding request {request_id} accepted; match {match.match_id} created")
        self.notification_service.create_notification(
            recipient_id=match.user_of_pet1_id, sender_id=user_id,
            n_type=NotificationType.BREEDING_ACCEPTED, target_id=match.match_id
        )
        return {"status": BreedingStatus.APPROVED.value, "match": asdict(match)}

    def withdraw_request(self, user_id: str, request_id: str) -> None:
        """[트랜잭션] 요청자 소유자가 대기 중인 요청을 취소(삭제)합니다."""
        request_ref = self.requests_ref.document(request_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _withdraw_in_transaction(transaction: Transaction):
            request_doc = request_ref.get(transaction=transaction)
            if not request_doc.exists:
                raise RequestNotFoundError("매칭 요청을 찾을 수 없습니다.")
            breeding_request = BreedingRequest.from_dict(request_doc.to_dict())
            requester_owner_id = self._find_owner_id(breeding_request.requester_pet_id, transaction)

            if requester_owner_id != user_id:
                raise ForbiddenError("요청을 보낸 사용자만 요청을 취소할 수 있습니다.")
            if breeding_request.status != BreedingStatus.PENDING:
                raise RequestAlreadyResolvedError("이미 처리된 매칭 요청은 취소할 수 없습니다.")
            transaction.delete(request_ref)

        _withdraw_in_transaction(transaction)
        logging.info(f"Breeding request {request_id} withdrawn by user {user_id}")

    # ------------------------------------------------------------------
    # 목록 조회
    # ------------------------------------------------------------------
    def list_requests(self, user_id: str, status: Optional[BreedingStatus] = None) -> List[Dict[str, Any]]:
        """
        사용자의 반려동물이 요청자 또는 수신자인 매칭 요청 목록 (최신순).
        각 요청에 requester_pet/requested_pet 문서와 direction(incoming/outgoing)을 채워 반환합니다.
        """
        user = self._get_user(user_id)
        pet_ids = list(user.pet_ids)
        if not pet_ids:
            return []

        requests_by_id = {}
        for field_name in ('requester_pet_id', 'requested_pet_id'):
            for doc in self._query_in_chunks(self.requests_ref, field_name, pet_ids):
                requests_by_id[doc.id] = BreedingRequest.from_dict(doc.to_dict())

        breeding_requests = [
            r for r in requests_by_id.values()
            if status is None or r.status == status
        ]
        pets = self._pet_dicts(
            pet_id for r in breeding_requests for pet_id in (r.requester_pet_id, r.requested_pet_id)
        )

        own_pet_ids = set(pet_ids)
        results = []
        for r in sorted(breeding_requests, key=lambda r: r.created_at, reverse=True):
            item = r.to_dict()
            item['requester_pet'] = pets.get(r.requester_pet_id)
            item['requested_pet'] = pets.get(r.requested_pet_id)
            item['direction'] = 'outgoing' if r.requester_pet_id in own_pet_ids else 'incoming'
            results.append(item)
        return results

    def list_matches(self, user_id: str) -> List[Dict[str, Any]]:
        """사용자가 어느 한쪽 반려동물의 소유자인 매칭 결과 목록 (최신순)."""
        self._get_user(user_id)

        matches_by_id = {}
        for field_name in ('user_of_pet1_id', 'user_of_pet2_id'):
            for doc in self.matches_ref.where(field_name, '==', user_id).stream():
                matches_by_id[doc.id] = Match.from_dict(doc.to_dict())

        pets = self._pet_dicts(
            pet_id for m in matches_by_id.values() for pet_id in (m.pet1_id, m.pet2_id)
        )
        results = []
        for m in sorted(matches_by_id.values(), key=lambda m: m.created_at, reverse=True):
            item = asdict(m)
            item['pet1'] = pets.get(m.pet1_id)
            item['pet2'] = pets.get(m.pet2_id)
            results.append(item)
        return results
