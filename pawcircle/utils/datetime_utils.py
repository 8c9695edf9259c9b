# pawcircle/utils/datetime_utils.py
"""
Firestore 문서의 시간 필드를 일관되게 다루기 위한 유틸리티 모듈

- 백엔드는 모든 시간을 UTC timezone-aware datetime으로 저장합니다.
- dataclass 모델을 Firestore 문서로 바꿀 때 Enum 값과 date 값을 함께 변환합니다.
"""

from datetime import datetime, date, timezone, time
from enum import Enum
from typing import Any, Dict

class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime 객체를 'Z' 접미사가 붙은 ISO 문자열로 변환"""
        if not isinstance(dt, datetime):
            raise ValueError(f"datetime 객체가 아닙니다: {dt!r}")
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc).isoformat().replace('+00:00', 'Z')

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 값을 재귀적으로 변환합니다.

        - Enum -> value
        - date -> 자정(UTC) datetime
        - timezone-naive datetime -> UTC datetime
        """
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        if isinstance(obj, date):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        if isinstance(obj, (list, tuple)):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """Firestore에서 읽은 timestamp를 UTC datetime으로 정규화합니다."""
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.from_firestore(item) for item in obj]
        return obj

    @staticmethod
    def touch(data: Dict[str, Any]) -> Dict[str, Any]:
        """부분 업데이트용 딕셔너리에 updated_at을 추가하여 반환합니다."""
        stamped = dict(data)
        stamped['updated_at'] = DateTimeUtils.now()
        return stamped
