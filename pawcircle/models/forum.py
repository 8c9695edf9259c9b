# pawcircle/models/forum.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, List, Dict, Any

from pawcircle.utils.datetime_utils import DateTimeUtils

@dataclass
class Author:
    """토픽/답글 문서 내부에 저장될 작성자 정보."""
    user_id: str
    user_name: str

@dataclass
class Category:
    """Firestore 'forum_categories' 컬렉션 문서 구조."""
    category_id: str
    name: str
    tags: List[str]
    created_by: str
    pic_url: Optional[str] = None
    topic_count: int = 0
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Category":
        processed_data = DateTimeUtils.from_firestore(data)
        processed_data.setdefault('tags', [])
        return cls(**processed_data)

@dataclass
class Topic:
    """Firestore 'forum_topics' 컬렉션 문서 구조."""
    topic_id: str
    category_id: str
    name: str
    content: str
    author: Dict[str, Any]  # {'user_id', 'user_name'}
    pic_url: Optional[str] = None
    reply_count: int = 0
    created_at: datetime = field(default_factory=DateTimeUtils.now)
    updated_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Topic":
        return cls(**DateTimeUtils.from_firestore(data))

@dataclass
class Reply:
    """Firestore 'forum_replies' 컬렉션 문서 구조."""
    reply_id: str
    topic_id: str
    content: str
    author: Dict[str, Any]
    pics: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Reply":
        return cls(**DateTimeUtils.from_firestore(data))
