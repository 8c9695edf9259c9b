# pawcircle/services/notification_service.py
import logging
import uuid
from dataclasses import asdict
from firebase_admin import firestore
from typing import Optional, List, Dict, Any

from pawcircle.models.notification import Notification, NotificationType
from pawcircle.utils.datetime_utils import DateTimeUtils

class NotificationService:
    """
    알림 관련 비즈니스 로직을 담당하는 공용 서비스 클래스.
    알림 저장 실패는 원래 작업을 실패시키지 않습니다 (로그만 남김).
    """
    def __init__(self, db=None):
        self.db = db or firestore.client()
        self.notifications_ref = self.db.collection('notifications')

    def create_notification(self, recipient_id: str, sender_id: str, n_type: NotificationType,
                            target_id: str, target_summary: Optional[str] = None) -> Optional[str]:
        """
        알림을 생성하여 Firestore에 저장하고 notification_id를 반환합니다.
        - 자기 자신에게 보내는 알림은 생성하지 않습니다.
        """
        if not recipient_id or recipient_id == sender_id:
            return None

        try:
            notification = Notification(
                notification_id=str(uuid.uuid4()),
                recipient_id=recipient_id,
                sender_id=sender_id,
                type=n_type,
                target_id=target_id,
                target_summary=target_summary
            )
            notification_dict = DateTimeUtils.for_firestore(asdict(notification))
            self.notifications_ref.document(notification.notification_id).set(notification_dict)
            logging.info(f"{n_type.value} 알림 생성 완료: {sender_id} -> {recipient_id}")
            return notification.notification_id
        except Exception as e:
            logging.error(f"알림 생성 중 오류 발생: {e}", exc_info=True)
            return None

    def get_notifications(self, user_id: str, unread_only: bool = False) -> List[Dict[str, Any]]:
        """사용자의 알림 목록을 최신순으로 조회합니다."""
        query = self.notifications_ref.where('recipient_id', '==', user_id)
        if unread_only:
            query = query.where('is_read', '==', False)
        docs = query.order_by('created_at', direction=firestore.Query.DESCENDING).stream()
        return [doc.to_dict() for doc in docs]

    def mark_as_read(self, user_id: str, notification_id: str) -> Dict[str, Any]:
        """알림을 읽음 처리합니다. 본인 알림이 아니면 PermissionError."""
        ref = self.notifications_ref.document(notification_id)
        doc = ref.get()
        if not doc.exists:
            raise FileNotFoundError("알림을 찾을 수 없습니다.")
        if doc.to_dict().get('recipient_id') != user_id:
            raise PermissionError("해당 알림에 접근할 권한이 없습니다.")
        ref.update({'is_read': True})
        return ref.get().to_dict()
