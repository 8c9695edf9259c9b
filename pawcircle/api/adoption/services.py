# pawcircle/api/adoption/services.py
import logging
import uuid
from typing import Dict, Any, List, Optional
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

from pawcircle.models.adoption import RescueListing, AdoptionRequest, HelpType, AdoptionStatus
from pawcircle.models.notification import NotificationType
from pawcircle.services.notification_service import NotificationService
from pawcircle.utils.datetime_utils import DateTimeUtils

class DuplicateApplicationError(ValueError):
    pass

class InvalidApplicationStateError(ValueError):
    pass

class AdoptionService:
    """구조/입양 게시글과 입양 신청서 관리 서비스."""
    def __init__(self, notification_service: NotificationService, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')
        self.listings_ref = self.db.collection('rescue_listings')
        self.applications_ref = self.db.collection('adoption_requests')
        self.notification_service = notification_service

    # --- 게시글 ---
    def create_listing(self, user_id: str, data: Dict[str, Any]) -> RescueListing:
        listing = RescueListing(
            listing_id=str(uuid.uuid4()),
            type_of_help=HelpType(data['type_of_help']),
            description=data['description'],
            pic_url=data['pic_url'],
            created_by=user_id
        )
        self.listings_ref.document(listing.listing_id).set(DateTimeUtils.for_firestore(listing.to_dict()))
        logging.info(f"Rescue listing {listing.listing_id} ({listing.type_of_help.value}) created by {user_id}")
        return listing

    def list_listings(self, type_of_help: Optional[HelpType] = None) -> List[RescueListing]:
        query = self.listings_ref
        if type_of_help:
            query = query.where('type_of_help', '==', type_of_help.value)
        docs = query.order_by('created_at', direction=firestore.Query.DESCENDING).stream()
        return [RescueListing.from_dict(doc.to_dict()) for doc in docs]

    def get_listing(self, listing_id: str) -> RescueListing:
        doc = self.listings_ref.document(listing_id).get()
        if not doc.exists:
            raise LookupError("게시글을 찾을 수 없습니다.")
        return RescueListing.from_dict(doc.to_dict())

    # --- 입양 신청 ---
    def submit_application(self, listing_id: str, user_id: str, data: Dict[str, Any]) -> AdoptionRequest:
        """
        [트랜잭션] 입양 신청서를 제출합니다. 신청자 정보는 사용자 프로필에서 채웁니다.
        같은 게시글에 대기 중인 본인 신청이 있으면 DuplicateApplicationError.
        """
        listing_ref = self.listings_ref.document(listing_id)
        user_ref = self.users_ref.document(user_id)
        request_id = str(uuid.uuid4())
        transaction = self.db.transaction()

        @firestore.transactional
        def _submit_in_transaction(transaction: Transaction):
            listing_doc = listing_ref.get(transaction=transaction)
            user_doc = user_ref.get(transaction=transaction)
            existing = (
                self.applications_ref
                .where('listing_id', '==', listing_id)
                .where('user_id', '==', user_id)
                .where('status', '==', AdoptionStatus.PENDING.value)
                .limit(1)
                .get(transaction=transaction)
            )
            if not listing_doc.exists:
                raise LookupError("게시글을 찾을 수 없습니다.")
            if not user_doc.exists:
                raise LookupError("사용자를 찾을 수 없습니다.")
            if existing:
                raise DuplicateApplicationError("이미 이 게시글에 대기 중인 입양 신청이 있습니다.")

            user_data = user_doc.to_dict()
            application = AdoptionRequest(
                request_id=request_id,
                listing_id=listing_id,
                user_id=user_id,
                applicant_name=user_data.get('name', ''),
                applicant_email=user_data.get('email', ''),
                applicant_phone=user_data.get('phone_no', ''),
                message=data.get('message', ''),
                experience_with_pets=data.get('experience_with_pets', ''),
                living_arrangement=data.get('living_arrangement', ''),
                reason_for_adoption=data.get('reason_for_adoption', '')
            )
            transaction.set(self.applications_ref.document(request_id), DateTimeUtils.for_firestore(application.to_dict()))
            return application, listing_doc.to_dict().get('created_by')

        application, listing_owner_id = _submit_in_transaction(transaction)
        logging.info(f"Adoption application {request_id} submitted for listing {listing_id}")

        self.notification_service.create_notification(
            recipient_id=listing_owner_id, sender_id=user_id,
            n_type=NotificationType.ADOPTION_REQUEST, target_id=request_id
        )
        return application

    def list_my_applications(self, user_id: str) -> List[AdoptionRequest]:
        docs = self.applications_ref.where('user_id', '==', user_id).stream()
        applications = [AdoptionRequest.from_dict(doc.to_dict()) for doc in docs]
        return sorted(applications, key=lambda a: a.created_at, reverse=True)

    def list_listing_applications(self, listing_id: str, user_id: str) -> List[AdoptionRequest]:
        """[게시글 작성자 전용] 게시글에 들어온 신청서 목록."""
        listing = self.get_listing(listing_id)
        if listing.created_by != user_id:
            raise PermissionError("게시글 작성자만 신청서 목록을 볼 수 있습니다.")
        docs = self.applications_ref.where('listing_id', '==', listing_id).stream()
        applications = [AdoptionRequest.from_dict(doc.to_dict()) for doc in docs]
        return sorted(applications, key=lambda a: a.created_at, reverse=True)

    def get_application(self, request_id: str, user_id: str) -> AdoptionRequest:
        """신청자 본인 또는 게시글 작성자만 조회할 수 있습니다."""
        doc = self.applications_ref.document(request_id).get()
        if not doc.exists:
            raise LookupError("입양 신청서를 찾을 수 없습니다.")
        application = AdoptionRequest.from_dict(doc.to_dict())
        if application.user_id == user_id:
            return application

        listing_doc = self.listings_ref.document(application.listing_id).get()
        if listing_doc.exists and listing_doc.to_dict().get('created_by') == user_id:
            return application
        raise PermissionError("입양 신청서에 접근할 권한이 없습니다.")

    def review_application(self, request_id: str, user_id: str, status: AdoptionStatus,
                           review_comments: str = '') -> AdoptionRequest:
        """[트랜잭션] 게시글 작성자가 대기 중인 신청서를 승인/거절합니다."""
        if status not in (AdoptionStatus.APPROVED, AdoptionStatus.REJECTED):
            raise InvalidApplicationStateError("승인 또는 거절만 선택할 수 있습니다.")

        application_ref = self.applications_ref.document(request_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _review_in_transaction(transaction: Transaction):
            application_doc = application_ref.get(transaction=transaction)
            if not application_doc.exists:
                raise LookupError("입양 신청서를 찾을 수 없습니다.")
            application = AdoptionRequest.from_dict(application_doc.to_dict())
            listing_doc = self.listings_ref.document(application.listing_id).get(transaction=transaction)

            if not listing_doc.exists or listing_doc.to_dict().get('created_by') != user_id:
                raise PermissionError("게시글 작성자만 신청서를 심사할 수 있습니다.")
            if application.status != AdoptionStatus.PENDING:
                raise InvalidApplicationStateError("이미 처리된 입양 신청서입니다.")

            reviewed_at = DateTimeUtils.now()
            transaction.update(application_ref, {
                'status': status.value,
                'reviewed_at': reviewed_at,
                'reviewed_by': user_id,
                'review_comments': review_comments,
                'updated_at': reviewed_at
            })
            application.status = status
            application.reviewed_at = reviewed_at
            application.reviewed_by = user_id
            application.review_comments = review_comments
            application.updated_at = reviewed_at
            return application

        application = _review_in_transaction(transaction)
        logging.info(f"Adoption application {request_id} reviewed: {status.value}")

        self.notification_service.create_notification(
            recipient_id=application.user_id, sender_id=user_id,
            n_type=NotificationType.ADOPTION_REVIEWED, target_id=request_id,
            target_summary=status.value
        )
        return application

    def withdraw_application(self, request_id: str, user_id: str) -> AdoptionRequest:
        """[트랜잭션] 신청자가 대기 중인 신청서를 철회합니다."""
        application_ref = self.applications_ref.document(request_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _withdraw_in_transaction(transaction: Transaction):
            application_doc = application_ref.get(transaction=transaction)
            if not application_doc.exists:
                raise LookupError("입양 신청서를 찾을 수 없습니다.")
            application = AdoptionRequest.from_dict(application_doc.to_dict())
            if application.user_id != user_id:
                raise PermissionError("본인의 신청서만 철회할 수 있습니다.")
            if application.status != AdoptionStatus.PENDING:
                raise InvalidApplicationStateError("대기 중인 신청서만 철회할 수 있습니다.")

            updated_at = DateTimeUtils.now()
            transaction.update(application_ref, {'status': AdoptionStatus.WITHDRAWN.value, 'updated_at': updated_at})
            application.status = AdoptionStatus.WITHDRAWN
            application.updated_at = updated_at
            return application

        application = _withdraw_in_transaction(transaction)
        logging.info(f"Adoption application {request_id} withdrawn by {user_id}")
        return application
