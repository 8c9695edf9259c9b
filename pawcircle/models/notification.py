# pawcircle/models/notification.py
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from pawcircle.utils.datetime_utils import DateTimeUtils

class NotificationType(Enum):
    """알림 유형을 정의하는 Enum 클래스"""
    BREEDING_REQUEST = "BREEDING_REQUEST"
    BREEDING_ACCEPTED = "BREEDING_ACCEPTED"
    BREEDING_REJECTED = "BREEDING_REJECTED"
    ADOPTION_REQUEST = "ADOPTION_REQUEST"
    ADOPTION_REVIEWED = "ADOPTION_REVIEWED"
    FORUM_REPLY = "FORUM_REPLY"

@dataclass
class Notification:
    """
    Firestore 'notifications' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    """
    notification_id: str
    recipient_id: str      # 알림을 받는 사용자 ID
    sender_id: str         # 알림을 유발한 사용자 ID
    type: NotificationType
    target_id: str         # 알림의 대상 객체 ID (request_id, match_id, topic_id 등)
    target_summary: Optional[str] = None
    is_read: bool = False
    created_at: datetime = field(default_factory=DateTimeUtils.now)
