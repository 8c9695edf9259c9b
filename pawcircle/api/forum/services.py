# pawcircle/api/forum/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Dict, Any, List
from firebase_admin import firestore
from firebase_admin.firestore import Transaction

from pawcircle.models.forum import Author, Category, Topic, Reply
from pawcircle.models.notification import NotificationType
from pawcircle.services.notification_service import NotificationService
from pawcircle.utils.datetime_utils import DateTimeUtils

class CategoryAlreadyExistsError(ValueError):
    pass

class ForumService:
    """
    커뮤니티 게시판(카테고리, 토픽, 답글) 비즈니스 로직을 담당하는 서비스.
    토픽/답글 수는 생성/삭제와 같은 트랜잭션에서 Increment로 갱신합니다.
    """
    def __init__(self, notification_service: NotificationService, db=None):
        self.db = db or firestore.client()
        self.users_ref = self.db.collection('users')
        self.categories_ref = self.db.collection('forum_categories')
        self.topics_ref = self.db.collection('forum_topics')
        self.replies_ref = self.db.collection('forum_replies')
        self.notification_service = notification_service

    def _get_author(self, user_id: str) -> Dict[str, Any]:
        user_doc = self.users_ref.document(user_id).get()
        if not user_doc.exists:
            raise LookupError("작성자를 찾을 수 없습니다.")
        return asdict(Author(user_id=user_id, user_name=user_doc.to_dict().get('user_name')))

    # --- 카테고리 ---
    def create_category(self, user_id: str, data: Dict[str, Any]) -> Category:
        """[트랜잭션] 이름이 중복되지 않는 경우에만 카테고리를 생성합니다."""
        category_id = str(uuid.uuid4())
        category_ref = self.categories_ref.document(category_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _create_in_transaction(transaction: Transaction):
            same_name = self.categories_ref.where('name', '==', data['name']).limit(1).get(transaction=transaction)
            if same_name:
                raise CategoryAlreadyExistsError("이미 존재하는 카테고리 이름입니다.")
            category = Category(
                category_id=category_id,
                name=data['name'],
                tags=data.get('tags', []),
                created_by=user_id,
                pic_url=data.get('pic_url')
            )
            transaction.set(category_ref, DateTimeUtils.for_firestore(asdict(category)))
            return category

        category = _create_in_transaction(transaction)
        logging.info(f"Forum category '{category.name}' created by {user_id}")
        return category

    def list_categories(self) -> List[Category]:
        docs = self.categories_ref.order_by('name').stream()
        return [Category.from_dict(doc.to_dict()) for doc in docs]

    # --- 토픽 ---
    def create_topic(self, category_id: str, user_id: str, data: Dict[str, Any]) -> Topic:
        author = self._get_author(user_id)
        category_ref = self.categories_ref.document(category_id)
        topic_id = str(uuid.uuid4())
        transaction = self.db.transaction()

        @firestore.transactional
        def _create_in_transaction(transaction: Transaction):
            if not category_ref.get(transaction=transaction).exists:
                raise LookupError("카테고리를 찾을 수 없습니다.")
            topic = Topic(
                topic_id=topic_id,
                category_id=category_id,
                name=data['name'],
                content=data['content'],
                author=author,
                pic_url=data.get('pic_url')
            )
            transaction.set(self.topics_ref.document(topic_id), DateTimeUtils.for_firestore(asdict(topic)))
            transaction.update(category_ref, {'topic_count': firestore.Increment(1)})
            return topic

        topic = _create_in_transaction(transaction)
        logging.info(f"Forum topic {topic_id} created in category {category_id}")
        return topic

    def list_topics(self, category_id: str) -> List[Topic]:
        """카테고리의 토픽 목록 (최신순)."""
        if not self.categories_ref.document(category_id).get().exists:
            raise LookupError("카테고리를 찾을 수 없습니다.")
        docs = (
            self.topics_ref
            .where('category_id', '==', category_id)
            .order_by('created_at', direction=firestore.Query.DESCENDING)
            .stream()
        )
        return [Topic.from_dict(doc.to_dict()) for doc in docs]

    def get_topic(self, topic_id: str) -> Topic:
        doc = self.topics_ref.document(topic_id).get()
        if not doc.exists:
            raise LookupError("토픽을 찾을 수 없습니다.")
        return Topic.from_dict(doc.to_dict())

    def update_topic(self, topic_id: str, user_id: str, update_data: Dict[str, Any]) -> Topic:
        topic_ref = self.topics_ref.document(topic_id)
        topic = self.get_topic(topic_id)
        if topic.author.get('user_id') != user_id:
            raise PermissionError("토픽을 수정할 권한이 없습니다.")
        topic_ref.update(DateTimeUtils.for_firestore(DateTimeUtils.touch(update_data)))
        return self.get_topic(topic_id)

    def delete_topic(self, topic_id: str, user_id: str) -> int:
        """[트랜잭션] 토픽과 그 답글을 삭제하고 카테고리의 토픽 수를 줄입니다. 삭제된 답글 수를 반환합니다."""
        topic_ref = self.topics_ref.document(topic_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _delete_in_transaction(transaction: Transaction):
            topic_doc = topic_ref.get(transaction=transaction)
            if not topic_doc.exists:
                raise LookupError("토픽을 찾을 수 없습니다.")
            topic = Topic.from_dict(topic_doc.to_dict())
            if topic.author.get('user_id') != user_id:
                raise PermissionError("토픽을 삭제할 권한이 없습니다.")
            category_ref = self.categories_ref.document(topic.category_id)
            category_exists = category_ref.get(transaction=transaction).exists
            reply_refs = [doc.reference for doc in self.replies_ref.where('topic_id', '==', topic_id).get(transaction=transaction)]

            for ref in reply_refs:
                transaction.delete(ref)
            transaction.delete(topic_ref)
            if category_exists:
                transaction.update(category_ref, {'topic_count': firestore.Increment(-1)})
            return len(reply_refs)

        deleted_replies = _delete_in_transaction(transaction)
        logging.info(f"Forum topic {topic_id} deleted with {deleted_replies} replies")
        return deleted_replies

    # --- 답글 ---
    def create_reply(self, topic_id: str, user_id: str, data: Dict[str, Any]) -> Reply:
        author = self._get_author(user_id)
        topic_ref = self.topics_ref.document(topic_id)
        reply_id = str(uuid.uuid4())
        transaction = self.db.transaction()

        @firestore.transactional
        def _create_in_transaction(transaction: Transaction):
            topic_snapshot = topic_ref.get(transaction=transaction)
            if not topic_snapshot.exists:
                raise LookupError("토픽을 찾을 수 없습니다.")
            reply = Reply(
                reply_id=reply_id,
                topic_id=topic_id,
                content=data['content'],
                author=author,
                pics=data.get('pics', [])
            )
            transaction.set(self.replies_ref.document(reply_id), DateTimeUtils.for_firestore(asdict(reply)))
            transaction.update(topic_ref, {'reply_count': firestore.Increment(1)})
            return reply, topic_snapshot.to_dict()

        reply, topic_data = _create_in_transaction(transaction)

        self.notification_service.create_notification(
            recipient_id=topic_data.get('author', {}).get('user_id'), sender_id=user_id,
            n_type=NotificationType.FORUM_REPLY, target_id=topic_id, target_summary=reply.content[:50]
        )
        return reply

    def list_replies(self, topic_id: str) -> List[Reply]:
        """토픽의 답글 목록 (작성순)."""
        self.get_topic(topic_id)
        docs = self.replies_ref.where('topic_id', '==', topic_id).order_by('created_at').stream()
        return [Reply.from_dict(doc.to_dict()) for doc in docs]
